"""Validation and registry output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import typer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tfstudio.engine.registry import PluginRegistry
    from tfstudio.validation.types import (
        DiagramValidationResult,
        TopologyError,
        ValidationIssue,
    )


class _SeverityStyle(NamedTuple):
    color: str
    symbol: str


_SEVERITY_STYLES: dict[str, _SeverityStyle] = {
    "error": _SeverityStyle("red", "x"),
    "warning": _SeverityStyle("yellow", "!"),
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Validation issues
# ---------------------------------------------------------------------------


def _format_issue(issue: ValidationIssue, *, color: bool) -> str:
    s = _SEVERITY_STYLES[issue.severity]
    return styler(color)(f"    {s.symbol} {issue.property_key}: {issue.message}", fg=s.color)


def _format_group(header: str, issues: Iterable[ValidationIssue], *, color: bool) -> list[str]:
    return [
        styler(color)(f"  # {header}", bold=True),
        *(_format_issue(i, color=color) for i in issues),
    ]


def format_issues(
    diagram: DiagramValidationResult,
    topology: list[TopologyError],
    *,
    color: bool = True,
) -> str:
    """Render diagram and topology issues grouped per resource."""
    blocks: list[str] = []
    for err in diagram.errors:
        header = f"{err.label} ({err.type_id})"
        blocks.append("\n".join(_format_group(header, err.errors, color=color)))
    for err in topology:
        blocks.append("\n".join(_format_group(err.instance_id, err.errors, color=color)))
    if not blocks:
        return "No issues found."
    return "\n\n".join(blocks)


def issue_counts(
    diagram: DiagramValidationResult, topology: list[TopologyError]
) -> dict[str, int]:
    """Count issues by severity."""
    counts = {"error": 0, "warning": 0}
    for group in [*diagram.errors, *topology]:
        for issue in group.errors:
            counts[issue.severity] += 1
    return counts


def format_issue_summary(counts: dict[str, int], *, color: bool = True) -> str:
    """Render ``Validation: 1 error, 2 warnings.``"""
    style = styler(color)
    parts = []
    for severity in ("error", "warning"):
        n = counts.get(severity, 0)
        text = f"{n} {severity}{'s' if n != 1 else ''}"
        parts.append(style(text, fg=_SEVERITY_STYLES[severity].color) if n and color else text)
    return f"Validation: {', '.join(parts)}."


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def format_types(registry: PluginRegistry, *, color: bool = True) -> str:
    """List registered resource types under their palette categories."""
    style = styler(color)
    sections: list[str] = []
    listed: set[str] = set()

    categories = [(c.id, c.label) for c in registry.get_palette_categories()]
    used = {registry.get_registration(t).schema.category for t in registry.resource_type_ids()}
    categories.extend((cid, cid) for cid in sorted(used - {cid for cid, _ in categories}))

    for category_id, label in categories:
        registrations = registry.get_resource_types_for_category(category_id)
        if not registrations:
            continue
        lines = [style(label, bold=True)]
        for reg in registrations:
            schema = reg.schema
            listed.add(schema.type_id)
            suffix = " [container]" if schema.is_container else ""
            lines.append(f"  {schema.type_id}  {schema.display_name}{suffix}")
        sections.append("\n".join(lines))

    if not listed:
        return "No resource types registered."
    return "\n\n".join(sections)
