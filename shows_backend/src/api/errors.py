from __future__ import annotations


class UnauthorizedError(Exception):
    """Raised when the x-api-key header does not match the current secret."""


class ShowNotFoundError(Exception):
    """Raised when no show exists with the requested id."""

    def __init__(self, show_id: int) -> None:
        super().__init__(f"Show {show_id} not found")
        self.show_id = show_id
