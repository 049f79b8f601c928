"""
Core code generation components.

Provides the data model, the generation context and the rendering engine
interface shared by every input path.
"""

from .errors import (
    LevoError,
    InvalidConfigFormat,
    MissingRequiredField,
    MissingProjectName,
    UnknownParentModel,
    UnknownMappingReference,
    MalformedModelString,
    ModelNotFoundInSchema,
    TemplateSourceUnavailable,
    NoFeatureFlagsDocumented,
    FileWriteFailure,
    ArchiveWriteFailure,
    ModelDefinitionError,
    TemplateError,
)
from .schema import Model, ModelProperty, Schema
from .context import GenerationContext, Mapping, TemplateInfo, TEMPLATE_SUFFIX
from .generator import (
    BASE64_MARKER,
    GeneratedFile,
    JinjaRenderingEngine,
    RenderingEngine,
)
from .templates import TemplateEngine

__all__ = [
    # Errors
    "LevoError",
    "InvalidConfigFormat",
    "MissingRequiredField",
    "MissingProjectName",
    "UnknownParentModel",
    "UnknownMappingReference",
    "MalformedModelString",
    "ModelNotFoundInSchema",
    "TemplateSourceUnavailable",
    "NoFeatureFlagsDocumented",
    "FileWriteFailure",
    "ArchiveWriteFailure",
    "ModelDefinitionError",
    "TemplateError",
    # Data model
    "Model",
    "ModelProperty",
    "Schema",
    # Generation context
    "GenerationContext",
    "Mapping",
    "TemplateInfo",
    "TEMPLATE_SUFFIX",
    # Rendering
    "BASE64_MARKER",
    "GeneratedFile",
    "RenderingEngine",
    "JinjaRenderingEngine",
    "TemplateEngine",
]
