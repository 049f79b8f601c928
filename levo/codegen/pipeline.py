"""
End-to-end generation: input -> generation context -> generated files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..logging_config import get_logger
from .builder import build_request
from .config import ConfigAdapter
from .core.errors import LevoError
from .core.generator import GeneratedFile, JinjaRenderingEngine, RenderingEngine
from .core.schema import Model

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Container for generated files and how they should be written."""

    files: List[GeneratedFile] = field(default_factory=list)
    zip_output: bool = False


def generate_from_configuration(
    config_file: str | Path, engine: Optional[RenderingEngine] = None
) -> GenerationResult:
    """
    Generate files from a configuration file.

    A configuration with ``"Zip": true`` asks for archive output.
    """
    engine = engine or JinjaRenderingEngine()
    adapter = ConfigAdapter()
    try:
        context = adapter.process_configuration_file(config_file)
    except LevoError as e:
        raise e.add_context("Error processing config")

    try:
        files = engine.process_mappings(context)
    except LevoError as e:
        raise e.add_context("Error generating files from config")

    return GenerationResult(files=files, zip_output=adapter.config.zip)


def generate_models_and_templates(
    models: List[Model],
    template_path: str,
    feature_tokens: Iterable[str] = (),
    package_name: Optional[str] = None,
    project_name: Optional[str] = None,
    engine: Optional[RenderingEngine] = None,
) -> GenerationResult:
    """Generate files for directly supplied models against a template path."""
    engine = engine or JinjaRenderingEngine()
    context = build_request(models, template_path, feature_tokens, package_name, project_name)

    try:
        files = engine.process_mappings(context)
    except LevoError as e:
        raise e.add_context("Error generating files")

    logger.info("Generated %d file(s) for %d model(s)", len(files), len(models))
    return GenerationResult(files=files)
