"""HCL generation engine and plugin registry."""

from tfstudio.engine.context import HclGenerationContext, PipelineContext, PropertyExpressionOptions
from tfstudio.engine.edge_rules import EdgeRuleValidator, EdgeValidationResult, ReferenceWriteBack
from tfstudio.engine.errors import (
    DependencyCycleError,
    DiagramValidationError,
    DuplicateResourceTypeError,
    EngineError,
    GenerationError,
    MissingResourceGroupError,
    PluginLoadError,
    PluginRegistryError,
    UnknownResourceTypeError,
    UnresolvedReferenceError,
)
from tfstudio.engine.graph import DependencyGraph
from tfstudio.engine.pipeline import HclPipeline, PipelineInput
from tfstudio.engine.plugins import (
    BindingHclGenerator,
    ConnectionRule,
    CreatesReference,
    HclGenerator,
    IconDefinition,
    InfraPlugin,
    OutputBindingSpec,
    PaletteCategory,
    ProviderConfig,
    ResourceTypeRegistration,
)
from tfstudio.engine.project import BackendConfig, ProjectConfig
from tfstudio.engine.registry import PluginRegistry
from tfstudio.engine.types import (
    BlockType,
    GeneratedFiles,
    HclBlock,
    OutputBinding,
    PipelineResult,
    TerraformOutput,
    TerraformVariable,
)

__all__ = [
    "BackendConfig",
    "BindingHclGenerator",
    "BlockType",
    "ConnectionRule",
    "CreatesReference",
    "DependencyCycleError",
    "DependencyGraph",
    "DiagramValidationError",
    "DuplicateResourceTypeError",
    "EdgeRuleValidator",
    "EdgeValidationResult",
    "EngineError",
    "GeneratedFiles",
    "GenerationError",
    "HclBlock",
    "HclGenerationContext",
    "HclGenerator",
    "HclPipeline",
    "IconDefinition",
    "InfraPlugin",
    "MissingResourceGroupError",
    "OutputBinding",
    "OutputBindingSpec",
    "PaletteCategory",
    "PipelineContext",
    "PipelineInput",
    "PipelineResult",
    "PluginLoadError",
    "PluginRegistry",
    "PluginRegistryError",
    "ProjectConfig",
    "PropertyExpressionOptions",
    "ProviderConfig",
    "ReferenceWriteBack",
    "ResourceTypeRegistration",
    "TerraformOutput",
    "TerraformVariable",
    "UnknownResourceTypeError",
    "UnresolvedReferenceError",
]
