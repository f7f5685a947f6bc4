"""Directory service.

Promotes approved discoveries and imports uploaded venue lists into the
master venue directory.
"""

from services.directory.service import (
    DirectoryService,
    PromotionResult,
    ImportResult,
    validate_row,
)

__all__ = [
    "DirectoryService",
    "PromotionResult",
    "ImportResult",
    "validate_row",
]
