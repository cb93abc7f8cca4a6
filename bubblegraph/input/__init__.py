# bubblegraph/input/__init__.py
"""Normalized input events and the gesture state machine."""
