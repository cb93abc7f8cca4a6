# bubblegraph/graph/__init__.py
"""Scene model and style tokens."""
