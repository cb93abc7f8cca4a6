# bubblegraph/render/__init__.py
"""
Rendering - ``Painter`` builds a ``Frame`` without touching GL;
``BubbleRenderer`` (``bubblegraph.render.renderer``) draws it with moderngl.
"""
