"""
Flag-driven request building.

Builds a ``GenerationContext`` from models given directly (compact strings
or a schema selection), a template path and feature tokens. Unlike the
configuration path, the mapping is derived: every ``.lt`` template is
mapped to every model.
"""

from typing import Iterable, List, Optional

from ..logging_config import get_logger
from .core.context import GenerationContext, TemplateInfo
from .core.errors import LevoError
from .core.schema import Model
from .features import apply_feature_tokens
from .sources import add_template_path

logger = get_logger(__name__)


def build_request(
    models: List[Model],
    template_path: str,
    feature_tokens: Iterable[str] = (),
    package_name: Optional[str] = None,
    project_name: Optional[str] = None,
) -> GenerationContext:
    """
    Build a generation context from directly supplied models.

    Args:
        models: Models to generate for (may be empty)
        template_path: Resolved template file or directory
        feature_tokens: ``all``, ``none``, ``+name``, ``-name`` or ``name``
        package_name: Overrides the default package when non-empty
        project_name: Overrides the default project when non-empty

    Returns:
        The populated context
    """
    context = GenerationContext()
    if package_name:
        context.package_name = package_name
    if project_name:
        context.project_name = project_name

    for new_model in models:
        try:
            added_model = context.add_model_with_name(new_model.name)
        except LevoError as e:
            raise e.add_context("Error adding models")
        added_model.parent = new_model.parent
        for prop in new_model.properties:
            try:
                added_model.add_property(
                    prop.remote_identifier, prop.local_identifier, prop.property_type
                )
            except LevoError as e:
                raise e.add_context("Error adding properties")

    try:
        templates = add_template_path(context, template_path)
    except LevoError as e:
        raise e.add_context("Error adding template")

    apply_feature_tokens(context, feature_tokens, template_path)

    try:
        add_mappings(context, templates, models)
    except LevoError as e:
        raise e.add_context("Error adding mapping")

    return context


def add_mappings(context: GenerationContext, templates: List[TemplateInfo], models: List[Model]):
    """Map every ``.lt`` template to every model, as a single mapping."""
    # Only map templates, not static files. Keys keep same-named templates
    # of different directories apart.
    template_names = [t.key for t in templates if t.is_template]
    model_names = [model.name for model in models]
    context.add_templates_for_models_mapping(template_names, model_names)
    logger.debug(
        "Mapped %d template(s) to %d model(s)", len(template_names), len(model_names)
    )
