# bubblegraph/view/__init__.py
"""Camera and viewport."""
