"""pathfx - path geometry, arc-length measurement and path effects."""

__version__ = "0.1.0"
