"""Edge legality checks between resource node handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from tfstudio.engine.plugins import ConnectionRule, OutputBindingSpec

if TYPE_CHECKING:
    from collections.abc import Iterable

# Source handles with this prefix are dynamic computed-output ports.
OUTPUT_HANDLE_PREFIX = "out-"


@dataclass(frozen=True, slots=True)
class OutputAcceptingHandle:
    type_id: str
    handle_id: str


@dataclass(frozen=True, slots=True)
class EdgeValidationResult:
    valid: bool
    rule: ConnectionRule | None = None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class ReferenceWriteBack:
    """``side`` node gets ``property_key`` pointing at ``referenced_instance_id``."""

    referenced_instance_id: str
    property_key: str
    side: Literal["source", "target"]


class EdgeRuleValidator:
    """Decides whether two node handles may be connected.

    Declared connection rules are checked first. Failing that, an ``out-*``
    source handle may connect to any handle registered as accepting outputs;
    such edges get a synthesized rule carrying an output binding.
    """

    def __init__(
        self,
        rules: Iterable[ConnectionRule],
        output_accepting_handles: Iterable[OutputAcceptingHandle] = (),
    ) -> None:
        self._rules = list(rules)
        self._output_handles = list(output_accepting_handles)
        self._output_handle_set = set(self._output_handles)

    @property
    def rules(self) -> list[ConnectionRule]:
        return list(self._rules)

    def validate(
        self,
        source_type: str,
        source_handle: str,
        target_type: str,
        target_handle: str,
    ) -> EdgeValidationResult:
        for rule in self._rules:
            if (
                rule.source_type == source_type
                and rule.source_handle == source_handle
                and rule.target_type == target_type
                and rule.target_handle == target_handle
            ):
                return EdgeValidationResult(valid=True, rule=rule)

        if source_handle.startswith(OUTPUT_HANDLE_PREFIX) and self.accepts_outputs(
            target_type, target_handle
        ):
            rule = _output_rule(source_type, source_handle, target_type, target_handle)
            return EdgeValidationResult(valid=True, rule=rule)

        return EdgeValidationResult(
            valid=False,
            reason=(
                f"No connection rule allows {source_type}[{source_handle}] "
                f"-> {target_type}[{target_handle}]"
            ),
        )

    def accepts_outputs(self, type_id: str, handle_id: str) -> bool:
        return OutputAcceptingHandle(type_id, handle_id) in self._output_handle_set

    def get_valid_targets(self, source_type: str, source_handle: str) -> list[ConnectionRule]:
        """Rules usable from a source handle, including output-binding targets."""
        targets = [
            r
            for r in self._rules
            if r.source_type == source_type and r.source_handle == source_handle
        ]
        if source_handle.startswith(OUTPUT_HANDLE_PREFIX):
            targets.extend(
                _output_rule(source_type, source_handle, h.type_id, h.handle_id)
                for h in self._output_handles
            )
        return targets

    def get_valid_sources(self, target_type: str, target_handle: str) -> list[ConnectionRule]:
        return [
            r
            for r in self._rules
            if r.target_type == target_type and r.target_handle == target_handle
        ]

    @staticmethod
    def get_reference_from_rule(
        rule: ConnectionRule,
        source_instance_id: str,
        target_instance_id: str,
    ) -> ReferenceWriteBack | None:
        """Reference implied by connecting an edge under *rule*, if any."""
        ref = rule.creates_reference
        if ref is None:
            return None
        referenced = target_instance_id if ref.side == "source" else source_instance_id
        return ReferenceWriteBack(
            referenced_instance_id=referenced,
            property_key=ref.property_key,
            side=ref.side,
        )


def _output_rule(
    source_type: str, source_handle: str, target_type: str, target_handle: str
) -> ConnectionRule:
    return ConnectionRule(
        source_type=source_type,
        source_handle=source_handle,
        target_type=target_type,
        target_handle=target_handle,
        output_binding=OutputBindingSpec(
            source_attribute=source_handle.removeprefix(OUTPUT_HANDLE_PREFIX)
        ),
    )
