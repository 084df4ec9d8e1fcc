from .transit_catalog import ITransitCatalog

__all__ = [
    "ITransitCatalog",
]
