"""
Generation context: the canonical request handed to a rendering engine.

Both the configuration adapter and the flag-driven request builder populate a
``GenerationContext`` incrementally; once it reaches
``RenderingEngine.process_mappings`` it is treated as read-only.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ...logging_config import get_logger
from .errors import ModelDefinitionError, TemplateSourceUnavailable, UnknownMappingReference
from .schema import Model

logger = get_logger(__name__)

TEMPLATE_SUFFIX = ".lt"
TEMPLATE_README = "README.md"


@dataclass
class TemplateInfo:
    """A template (or static asset) discovered in a template source."""

    file_name: str
    directory: str = ""  # Relative to the template root, "" or ending in "/"
    contents: bytes = b""

    @property
    def is_template(self) -> bool:
        return self.file_name.endswith(TEMPLATE_SUFFIX)

    @property
    def key(self) -> str:
        """Path relative to the template root, unique within a template set."""
        return self.directory + self.file_name


@dataclass
class Mapping:
    """Binds a set of model names to a set of template names."""

    model_names: List[str] = field(default_factory=list)
    template_names: List[str] = field(default_factory=list)


@dataclass
class GenerationContext:
    """Package metadata, models, templates, mappings and enabled features."""

    package_name: str = ""
    project_name: str = ""
    templater_version: str = ""
    language: str = ""
    models: List[Model] = field(default_factory=list)
    templates: List[TemplateInfo] = field(default_factory=list)
    mappings: List[Mapping] = field(default_factory=list)
    features: List[str] = field(default_factory=list)

    # Models

    def add_model_with_name(self, name: str) -> Model:
        """
        Register a new, empty model.

        Raises:
            ModelDefinitionError: If the name is empty or already registered
        """
        if not name:
            raise ModelDefinitionError("Model name must not be empty")
        if self.model_for_name(name) is not None:
            raise ModelDefinitionError(f"Model '{name}' is already defined")
        model = Model(name=name)
        self.models.append(model)
        return model

    def model_for_name(self, name: str) -> Optional[Model]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    # Templates

    def add_template_directory(self, directory: str | Path) -> List[TemplateInfo]:
        """
        Recursively register every file below a directory.

        Hidden files and directories (``.git`` of a cached repository, for
        example) are skipped. ``TemplateInfo.directory`` is relative to
        ``directory`` and ends with ``/`` unless the file sits at the root.

        Returns:
            The templates added, in sorted path order
        """
        root = Path(directory)
        if not root.is_dir():
            raise TemplateSourceUnavailable(f"Template directory not found: {root}")

        added = []
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if not path.is_file():
                continue
            parent = relative.parent.as_posix()
            template = TemplateInfo(
                file_name=path.name,
                directory="" if parent == "." else parent + "/",
                contents=_read_template(path),
            )
            self.templates.append(template)
            added.append(template)

        logger.info("Registered %d template file(s) from %s", len(added), root)
        return added

    def add_template_file_path(self, file_path: str | Path) -> TemplateInfo:
        """Register a single template file; its directory is its parent path."""
        path = Path(file_path)
        if not path.is_file():
            raise TemplateSourceUnavailable(f"Template file not found: {path}")
        parent = path.parent.as_posix()
        template = TemplateInfo(
            file_name=path.name,
            directory="" if parent == "." else parent + "/",
            contents=_read_template(path),
        )
        self.templates.append(template)
        logger.info("Registered template file %s", path)
        return template

    def templates_for_name(self, name: str) -> List[TemplateInfo]:
        """
        Templates a mapping entry refers to.

        ``name`` is matched against ``TemplateInfo.key`` first; a bare file
        name matches every template of that name, whatever its directory.
        """
        exact = [t for t in self.templates if t.key == name]
        if exact:
            return exact
        return [t for t in self.templates if t.file_name == name]

    # Mappings

    def add_templates_for_models_mapping(
        self, template_names: Iterable[str], model_names: Iterable[str]
    ) -> Mapping:
        """
        Bind templates to models.

        Raises:
            UnknownMappingReference: If any name is not part of this context
        """
        template_names = list(template_names)
        model_names = list(model_names)

        for name in template_names:
            if not self.templates_for_name(name):
                raise UnknownMappingReference(f"Mapping references unknown template: {name}")
        for name in model_names:
            if self.model_for_name(name) is None:
                raise UnknownMappingReference(f"Mapping references unknown model: {name}")

        mapping = Mapping(model_names=model_names, template_names=template_names)
        self.mappings.append(mapping)
        logger.debug("Mapped templates %s to models %s", template_names, model_names)
        return mapping

    # Features

    def add_template_feature(self, feature: str):
        if feature not in self.features:
            self.features.append(feature)

    def remove_template_feature(self, feature: str):
        if feature in self.features:
            self.features.remove(feature)

    def has_feature(self, feature: str) -> bool:
        return feature in self.features

    def as_template_variables(self) -> Dict[str, object]:
        """Variables shared by every template render."""
        return {
            "context": self,
            "package_name": self.package_name,
            "project_name": self.project_name,
            "templater_version": self.templater_version,
            "language": self.language,
            "features": set(self.features),
        }


def _read_template(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise TemplateSourceUnavailable(f"Unable to read template {path}: {e}") from e
