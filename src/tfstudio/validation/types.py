"""Structured validation results."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

Severity: TypeAlias = Literal["error", "warning"]


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_key: str
    message: str
    severity: Severity = "error"


class DiagramError(BaseModel):
    """Issues found on one resource instance."""

    model_config = ConfigDict(frozen=True)

    instance_id: str
    type_id: str
    label: str
    errors: list[ValidationIssue]

    @property
    def has_errors(self) -> bool:
        return has_blocking_errors(self.errors)


class DiagramValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[DiagramError] = Field(default_factory=list)


class TopologyNode(BaseModel):
    """Minimal node shape needed for network topology checks."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    parent_id: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    label: str | None = None


class TopologyError(BaseModel):
    model_config = ConfigDict(frozen=True)

    instance_id: str
    errors: list[ValidationIssue]

    @property
    def has_errors(self) -> bool:
        return has_blocking_errors(self.errors)


def has_blocking_errors(issues: Iterable[ValidationIssue]) -> bool:
    """True if any issue has ``error`` severity; warnings never block."""
    return any(issue.severity == "error" for issue in issues)
