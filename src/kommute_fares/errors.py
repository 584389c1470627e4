"""Domain errors."""

from __future__ import annotations

from typing import Any


class InvalidInputError(ValueError):
    """An input violates a pricing precondition (negative distance, bad direction, …).

    Raised synchronously at the call boundary; never retried.
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")
