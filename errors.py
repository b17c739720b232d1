class PasteError(Exception):
    """Base class for paste service errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(PasteError):
    """Client input was missing or malformed. Raised before the store is touched."""


class NotFound(PasteError):
    """The store confirmed that no row matches the requested id."""

    def __init__(self, paste_id: int):
        super().__init__(f"paste {paste_id} not found")
        self.paste_id = paste_id


class StoreError(PasteError):
    """Connectivity, timeout or driver failure in the relational store."""
