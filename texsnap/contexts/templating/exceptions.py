"""Custom exceptions for the templating context."""

from pathlib import Path
from typing import Optional


class TemplateNotFoundError(KeyError):
    """No stored template has the requested id."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(template_id)

    def __str__(self) -> str:
        return f"Template not found: {self.template_id}"


class TemplateStoreError(Exception):
    """
    Exception raised when the template store file cannot be read or written.

    Attributes:
        message: Error description
        store_path: Path to the store file
        original_error: The underlying I/O or JSON error
    """

    def __init__(
        self,
        message: str,
        store_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.store_path = store_path
        self.original_error = original_error

        parts = [message]
        if store_path:
            parts.append(f"Store: {store_path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
