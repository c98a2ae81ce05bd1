"""Package-specific exception types.

The markup pipeline itself never raises; these cover the limits and file
handling wrapped around it.
"""

from __future__ import annotations


class RenderError(ValueError):
    """Base class for rendering-related errors."""


class InputTooLongError(RenderError):
    """Raised when a message exceeds the configured maximum length.

    Args:
        length: Number of characters in the rejected input.
        max_input_length: Maximum allowed number of characters.
    """

    def __init__(self, length: int, max_input_length: int):
        self.length = length
        self.max_input_length = max_input_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Input of {self.length} characters exceeds maximum allowed length "
            f"of {self.max_input_length} characters"
        )
