"""Variable and output collectors.

Generators register variables and outputs through the generation context;
both collectors deduplicate by name, first registration wins.
"""

from __future__ import annotations

import logging

from tfstudio.engine.escape import format_hcl_value, quote
from tfstudio.engine.types import TerraformOutput, TerraformVariable

logger = logging.getLogger(__name__)


class VariableCollector:
    def __init__(self) -> None:
        self._variables: dict[str, TerraformVariable] = {}

    def add(self, variable: TerraformVariable) -> None:
        if variable.name in self._variables:
            logger.debug("Variable %s already registered, keeping first", variable.name)
            return
        self._variables[variable.name] = variable

    def get_all(self) -> list[TerraformVariable]:
        return list(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)

    def generate_variables_hcl(self) -> str:
        return "\n\n".join(_render_variable(v) for v in self._variables.values())


class OutputCollector:
    def __init__(self) -> None:
        self._outputs: dict[str, TerraformOutput] = {}

    def add(self, output: TerraformOutput) -> None:
        if output.name in self._outputs:
            logger.debug("Output %s already registered, keeping first", output.name)
            return
        self._outputs[output.name] = output

    def get_all(self) -> list[TerraformOutput]:
        return list(self._outputs.values())

    def generate_outputs_hcl(self) -> str:
        return "\n\n".join(_render_output(o) for o in self._outputs.values())


def _render_variable(v: TerraformVariable) -> str:
    lines = [
        f'variable "{v.name}" {{',
        f"  type        = {v.type}",
        f"  description = {quote(v.description)}",
    ]
    if v.default is not None:
        lines.append(f"  default     = {format_hcl_value(v.default)}")
    if v.sensitive:
        lines.append("  sensitive   = true")
    if v.validation is not None:
        lines.extend(
            [
                "  validation {",
                f"    condition     = {v.validation.condition}",
                f"    error_message = {quote(v.validation.error_message)}",
                "  }",
            ]
        )
    lines.append("}")
    return "\n".join(lines)


def _render_output(o: TerraformOutput) -> str:
    lines = [
        f'output "{o.name}" {{',
        f"  value       = {o.value}",
        f"  description = {quote(o.description)}",
    ]
    if o.sensitive:
        lines.append("  sensitive   = true")
    lines.append("}")
    return "\n".join(lines)
