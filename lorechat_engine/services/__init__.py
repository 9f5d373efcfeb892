"""Services package."""

from .card_import_service import CardImportService

__all__ = [
    'CardImportService',
]
