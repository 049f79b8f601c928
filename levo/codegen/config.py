"""
Configuration file handling for code generation.

Decodes a JSON configuration document (package metadata, schema file,
template directory, model-to-template mappings, feature flags) and turns it
into a fully validated ``GenerationContext``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..logging_config import get_logger
from ..utils import JSONLoaderError, parse_json, read_bytes
from .core.context import GenerationContext
from .core.errors import (
    InvalidConfigFormat,
    MissingProjectName,
    MissingRequiredField,
    UnknownParentModel,
)
from .core.schema import Schema
from .models import load_schema_file
from .sources import add_template_path, get_updated_template_repo

logger = get_logger(__name__)


@dataclass
class ModelToTemplateMapping:
    """One entry of the configuration's ``Mappings`` list."""

    model_names: List[str] = field(default_factory=list)
    template_names: List[str] = field(default_factory=list)


@dataclass
class GenerationConfig:
    """Decoded configuration document."""

    templater_version: str = ""
    base_package: str = ""
    language: str = ""
    model_schema_file_name: str = ""
    templates_directory: str = ""
    mappings: List[ModelToTemplateMapping] = field(default_factory=list)
    template_features: List[str] = field(default_factory=list)
    zip: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "GenerationConfig":
        """
        Build a configuration from decoded JSON. Unknown keys are ignored.

        Raises:
            InvalidConfigFormat: If the document or a field has the wrong shape
        """
        if not isinstance(data, dict):
            raise InvalidConfigFormat("Configuration must be a JSON object")

        mappings = []
        for entry in _typed(data, "Mappings", list, []):
            if not isinstance(entry, dict):
                raise InvalidConfigFormat(f"Mapping must be an object, got: {entry!r}")
            mappings.append(
                ModelToTemplateMapping(
                    model_names=_string_list(entry, "ModelNames"),
                    template_names=_string_list(entry, "TemplateNames"),
                )
            )

        return cls(
            templater_version=_typed(data, "TemplaterVersion", str, ""),
            base_package=_typed(data, "BasePackage", str, ""),
            language=_typed(data, "Language", str, ""),
            model_schema_file_name=_typed(data, "ModelSchemaFileName", str, ""),
            templates_directory=_typed(data, "TemplatesDirectory", str, ""),
            mappings=mappings,
            template_features=_string_list(data, "TemplateFeatures"),
            zip=_typed(data, "Zip", bool, False),
        )

    def validate(self):
        """
        Check the required scalar fields.

        Raises:
            MissingRequiredField: For the first empty field
        """
        if not self.base_package:
            raise MissingRequiredField(
                "BasePackage", "Configuration did not define a Base Package"
            )
        if not self.language:
            raise MissingRequiredField("Language", "Configuration did not define a Language")
        if not self.templater_version:
            raise MissingRequiredField(
                "TemplaterVersion", "Configuration did not define a Templater Version"
            )


class ConfigAdapter:
    """Builds a generation context from a JSON configuration document."""

    def __init__(self):
        self.config: Optional[GenerationConfig] = None
        self.context: Optional[GenerationContext] = None

    def process_configuration_file(self, file_name: str | Path) -> GenerationContext:
        """Read ``file_name`` and process it as a configuration document."""
        try:
            contents = read_bytes(file_name)
        except JSONLoaderError as e:
            raise InvalidConfigFormat(str(e)) from e
        return self.process_configuration_string(contents)

    def process_configuration_string(self, config_string: bytes | str) -> GenerationContext:
        """
        Decode, validate and resolve a configuration document.

        Every step is a hard gate: the first failure aborts and nothing is
        kept on the adapter.

        Returns:
            The fully built context
        """
        self.config = None
        self.context = None

        config = self.parse_configuration_string(config_string)

        context = GenerationContext(
            package_name=config.base_package,
            language=config.language,
            templater_version=config.templater_version,
        )
        for feature in config.template_features:
            context.add_template_feature(feature)

        schema = load_schema_file(config.model_schema_file_name)
        self._add_project_name(context, schema)
        self._add_models(context, schema)

        templates_directory = get_updated_template_repo(config.templates_directory)
        add_template_path(context, templates_directory)

        self._add_mappings(context, config.mappings)

        config.validate()
        self.config = config
        self.context = context
        logger.info(
            "Configuration processed: %d model(s), %d template(s), %d mapping(s)",
            len(context.models),
            len(context.templates),
            len(context.mappings),
        )
        return context

    def parse_configuration_string(self, config_string: bytes | str) -> GenerationConfig:
        """Decode and validate the configuration document only."""
        try:
            data = parse_json(config_string, "configuration")
        except JSONLoaderError as e:
            raise InvalidConfigFormat(str(e)) from e
        config = GenerationConfig.from_dict(data)
        config.validate()
        return config

    def _add_project_name(self, context: GenerationContext, schema: Schema):
        if not schema.project:
            raise MissingProjectName("Schema did not define a Project name")
        context.project_name = schema.project

    def _add_models(self, context: GenerationContext, schema: Schema):
        add_schema_models(context, schema)

    def _add_mappings(self, context: GenerationContext, mappings: List[ModelToTemplateMapping]):
        for mapping in mappings:
            context.add_templates_for_models_mapping(mapping.template_names, mapping.model_names)


def add_schema_models(context: GenerationContext, schema: Schema):
    """
    Add every schema model to ``context``, then link parents by name.

    Two passes so a model may name a parent defined later in the schema.

    Raises:
        UnknownParentModel: If a parent is missing or parents form a cycle
    """
    for model_from_schema in schema.models:
        model = context.add_model_with_name(model_from_schema.name)
        model.parent = model_from_schema.parent
        for prop in model_from_schema.properties:
            model.add_property(
                prop.remote_identifier,
                prop.local_identifier or prop.remote_identifier,
                prop.property_type,
            )

    for model in context.models:
        if model.parent:
            parent = context.model_for_name(model.parent)
            if parent is None:
                raise UnknownParentModel(model.parent)
            model.parent_ref = parent

    for model in context.models:
        _check_parent_cycle(model)


def _check_parent_cycle(model):
    seen = [model.name]
    current = model.parent_ref
    while current is not None:
        if current.name in seen:
            chain = " -> ".join(seen + [current.name])
            raise UnknownParentModel(current.name, f"Parent cycle detected: {chain}")
        seen.append(current.name)
        current = current.parent_ref


def _typed(data: Dict[str, Any], key: str, expected: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, expected):
        raise InvalidConfigFormat(
            f"Field {key} must be of type {expected.__name__}, got: {value!r}"
        )
    return value


def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    values = _typed(data, key, list, [])
    if not all(isinstance(v, str) for v in values):
        raise InvalidConfigFormat(f"Field {key} must be a list of strings")
    return list(values)
