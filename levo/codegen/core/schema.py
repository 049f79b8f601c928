"""
Core schema representation for code generation.

Models and their properties as read from a schema document, parsed from a
compact model string, or registered on a generation context.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import InvalidConfigFormat, ModelDefinitionError


@dataclass
class ModelProperty:
    """Represents a single property of a model."""

    remote_identifier: str  # Name on the wire / in the schema
    local_identifier: str = ""
    property_type: str = ""

    def __post_init__(self):
        if not self.local_identifier:
            self.local_identifier = self.remote_identifier

    @property
    def is_list_type(self) -> bool:
        """True for list types written as ``[]Element``."""
        return self.property_type.startswith("[]")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelProperty":
        """Build a property from a schema ``Properties`` entry."""
        if not isinstance(data, dict):
            raise InvalidConfigFormat(f"Property must be an object, got: {data!r}")
        return cls(
            remote_identifier=_string_field(data, "RemoteIdentifier"),
            local_identifier=_string_field(data, "LocalIdentifier"),
            property_type=_string_field(data, "PropertyType"),
        )


@dataclass
class Model:
    """A named data entity with typed properties and an optional parent."""

    name: str
    parent: str = ""
    properties: List[ModelProperty] = field(default_factory=list)

    # Resolved by name once every model of a request has been added
    parent_ref: Optional["Model"] = field(default=None, repr=False, compare=False)

    def add_property(
        self, remote_identifier: str, local_identifier: str, property_type: str
    ) -> ModelProperty:
        """
        Append a property to this model.

        Args:
            remote_identifier: Wire/schema name (required)
            local_identifier: Name used in generated code (defaults to remote)
            property_type: Free-form type token (required)

        Returns:
            The new property

        Raises:
            ModelDefinitionError: If the identifier or the type is empty
        """
        if not remote_identifier:
            raise ModelDefinitionError(
                f"Property of model '{self.name}' has no RemoteIdentifier"
            )
        if not property_type:
            raise ModelDefinitionError(
                f"Property '{remote_identifier}' of model '{self.name}' has no PropertyType"
            )
        prop = ModelProperty(remote_identifier, local_identifier, property_type)
        self.properties.append(prop)
        return prop

    @property
    def has_list_type(self) -> bool:
        return any(prop.is_list_type for prop in self.properties)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Model":
        """Build a model from a schema ``Models`` entry (no validation)."""
        if not isinstance(data, dict):
            raise InvalidConfigFormat(f"Model must be an object, got: {data!r}")
        properties = data.get("Properties") or []
        if not isinstance(properties, list):
            raise InvalidConfigFormat("Model Properties must be a list")
        return cls(
            name=_string_field(data, "Name"),
            parent=_string_field(data, "Parent"),
            properties=[ModelProperty.from_dict(p) for p in properties],
        )


@dataclass
class Schema:
    """A schema document: project name plus model definitions."""

    project: str = ""
    models: List[Model] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Schema":
        """
        Build a schema from decoded JSON.

        Raises:
            InvalidConfigFormat: If the document does not have the schema shape
        """
        if not isinstance(data, dict):
            raise InvalidConfigFormat("Schema must be a JSON object")
        models = data.get("Models") or []
        if not isinstance(models, list):
            raise InvalidConfigFormat("Schema Models must be a list")
        return cls(
            project=_string_field(data, "Project"),
            models=[Model.from_dict(m) for m in models],
        )


def _string_field(data: Dict[str, Any], key: str) -> str:
    """Read an optional string field, treating null as empty."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidConfigFormat(f"Field {key} must be a string, got: {value!r}")
    return value
