"""Interactive 2D physics sketches rendered with pygame."""

__version__ = "0.1.0"
