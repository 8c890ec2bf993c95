"""Load-time validation report.

Loading a network never aborts on a single bad file; problems are collected
here so callers can decide how to surface them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class IssueSeverity(Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single problem found while loading.

    Attributes:
        severity (IssueSeverity): Error or warning.
        message (str): Human-readable description.
        location (Optional[str]): File name or ``<node>/<field>`` pointer.
    """

    severity: IssueSeverity
    message: str
    location: Optional[str] = None

    def __str__(self) -> str:
        if self.location:
            return f"[{self.location}] {self.message}"
        return self.message


@dataclass
class ValidationResult:
    """Errors and warnings collected while loading a network."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    def add_error(self, message: str, location: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(IssueSeverity.ERROR, message, location))

    def add_warning(self, message: str, location: Optional[str] = None) -> None:
        self.warnings.append(ValidationIssue(IssueSeverity.WARNING, message, location))

    def is_valid(self) -> bool:
        """True when no errors were recorded (warnings are allowed)."""
        return not self.errors

    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)

    def __str__(self) -> str:
        lines: List[str] = []
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  {issue}" for issue in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  {issue}" for issue in self.warnings)
        return "\n".join(lines)
