from .http_transit_catalog import HttpTransitCatalog
from .local_transit_catalog import LocalTransitCatalog

__all__ = [
    "HttpTransitCatalog",
    "LocalTransitCatalog",
]
