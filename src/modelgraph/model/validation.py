"""
Validation messages and the context they are collected in.

Validation never raises for schema problems; every check appends a
ValidationMessage to a ValidationContext, and the whole batch is returned
as one ValidationResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from ..core.defs import SourceLocation


class Severity(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationMessage:
    """Single diagnostic with its severity and location."""
    severity: Severity
    message: str
    location: Optional[SourceLocation] = None

    @classmethod
    def error(cls, message: str, location: Optional[SourceLocation] = None) -> ValidationMessage:
        return cls(Severity.ERROR, message, location)

    @classmethod
    def warn(cls, message: str, location: Optional[SourceLocation] = None) -> ValidationMessage:
        return cls(Severity.WARN, message, location)

    @classmethod
    def info(cls, message: str, location: Optional[SourceLocation] = None) -> ValidationMessage:
        return cls(Severity.INFO, message, location)

    def __str__(self) -> str:
        location = str(self.location) if self.location else "global"
        return f"[{self.severity.value}] {location}: {self.message}"


@dataclass
class ValidationResult:
    """Consolidated diagnostics of one validation pass."""
    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARN]

    @property
    def infos(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.INFO]

    @property
    def has_errors(self) -> bool:
        return any(m.severity == Severity.ERROR for m in self.messages)

    def message_strings(self) -> list[str]:
        """Get all messages as strings."""
        return [str(m) for m in self.messages]


class ValidationContext:
    """Append-only sink for validation messages."""

    def __init__(self, messages: Iterable[ValidationMessage] = ()):
        self._messages: list[ValidationMessage] = list(messages)

    def add_message(self, message: ValidationMessage) -> None:
        self._messages.append(message)

    def as_result(self) -> ValidationResult:
        return ValidationResult(messages=list(self._messages))
