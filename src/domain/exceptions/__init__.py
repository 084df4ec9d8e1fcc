from .catalog import CatalogError, LineNotFound, PatternNotFound, ShapeNotFound

__all__ = [
    "CatalogError",
    "LineNotFound",
    "PatternNotFound",
    "ShapeNotFound",
]
