"""Edge-based surface meshes with connectivity queries, volume measures and clustering metrics."""

__version__ = "1.0.0"
__all__ = ["mesh", "queries", "volume", "metrics"]