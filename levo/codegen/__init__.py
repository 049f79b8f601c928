"""
levo code generation.

Resolves configuration files, compact model strings or schema selections
into a generation context, renders it, and writes the generated files.
"""

from .builder import build_request
from .config import ConfigAdapter, GenerationConfig
from .core import (
    GeneratedFile,
    GenerationContext,
    JinjaRenderingEngine,
    LevoError,
    Model,
    ModelProperty,
    RenderingEngine,
)
from .models import parse_model_string, process_models_from_schema, process_raw_models
from .output import FileMaterializer, OverwritePolicy, write_zip_file
from .pipeline import GenerationResult, generate_from_configuration, generate_models_and_templates
from .sources import get_updated_template_repo

__all__ = [
    "build_request",
    "ConfigAdapter",
    "GenerationConfig",
    "GeneratedFile",
    "GenerationContext",
    "JinjaRenderingEngine",
    "LevoError",
    "Model",
    "ModelProperty",
    "RenderingEngine",
    "parse_model_string",
    "process_models_from_schema",
    "process_raw_models",
    "FileMaterializer",
    "OverwritePolicy",
    "write_zip_file",
    "GenerationResult",
    "generate_from_configuration",
    "generate_models_and_templates",
    "get_updated_template_repo",
]
