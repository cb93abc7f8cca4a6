# bubblegraph/core/__init__.py
"""Math and signal primitives."""
