# backend/utils/exceptions.py
from typing import Optional


class ConfigurationError(RuntimeError):
    """A required setting (sheet id, credentials, sender) is missing."""


class SheetsError(RuntimeError):
    """The Sheets API rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, status: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = status

    @property
    def permission_denied(self) -> bool:
        return self.status == "PERMISSION_DENIED" or self.status_code == 403


class SheetStructureError(LookupError):
    """A tab is missing the header, column or row an operation relies on."""


class MalformedCellError(ValueError):
    """A cell a write depends on does not hold a number."""

    def __init__(self, product: str, fields):
        self.product = product
        self.fields = list(fields)
        super().__init__(f"Product '{product}' has non-numeric {', '.join(self.fields)} in inventory")


class EmailError(RuntimeError):
    """The mail transport failed to deliver a message."""
