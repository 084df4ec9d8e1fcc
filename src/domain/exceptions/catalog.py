class CatalogError(Exception):
    """Base exception for lookups against the loaded transit catalog."""


class LineNotFound(CatalogError):
    """Raised when no line matches the requested short name or id."""


class PatternNotFound(CatalogError):
    """Raised when a pattern id is not part of the selected line."""


class ShapeNotFound(CatalogError):
    """Raised when a pattern's geometry is unavailable for export."""
