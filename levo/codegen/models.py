"""
Model resolution.

Turns compact model strings (``"User FirstName:string Age:int"``) or a
selection of names from a schema file into ``Model`` values.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional

from ..logging_config import get_logger
from ..utils import JSONLoaderError, load_json_from_file
from .core.errors import InvalidConfigFormat, LevoError, MalformedModelString, ModelNotFoundInSchema
from .core.schema import Model, ModelProperty, Schema

logger = get_logger(__name__)

# Every character outside A..z (ASCII 65-122), digits and underscore is a
# delimiter. Runs of delimiters yield empty tokens, which are kept.
MODEL_TOKEN_DELIMITER = re.compile(r"[^A-z0-9_]")


def parse_model_string(model_string: str) -> Model:
    """
    Parse a compact model definition.

    Args:
        model_string: ``Name[ Prop Type]...`` with any delimiter characters

    Returns:
        The parsed model

    Raises:
        MalformedModelString: On an odd number of property tokens, or an
            empty property name or type
    """
    parts = MODEL_TOKEN_DELIMITER.split(model_string)
    model_name, parts = parts[0], parts[1:]

    if len(parts) % 2 != 0:
        raise MalformedModelString("Odd number of property parts")

    properties = []
    for prop_name, prop_type in zip(parts[0::2], parts[1::2]):
        if not prop_name or not prop_type:
            raise MalformedModelString("Name or type of property is empty string")
        properties.append(
            ModelProperty(
                remote_identifier=prop_name,
                local_identifier=re.sub(r"\s", "", prop_name),
                property_type=prop_type,
            )
        )

    logger.debug("Parsed model %s with %d properties", model_name, len(properties))
    return Model(name=model_name, properties=properties)


def process_raw_models(model_strings: Iterable[str]) -> List[Model]:
    """Parse every compact model string, failing on the first bad one."""
    models = []
    for model_string in model_strings:
        try:
            models.append(parse_model_string(model_string))
        except LevoError as e:
            raise e.add_context("Error parsing model string")
    return models


def load_schema_file(schema_path: str | Path) -> Schema:
    """Read and decode a schema document."""
    try:
        data = load_json_from_file(schema_path)
    except JSONLoaderError as e:
        raise InvalidConfigFormat(str(e)) from e
    return Schema.from_dict(data)


def process_models_from_schema(
    model_name: Optional[str],
    model_names: Optional[Iterable[str]],
    schema_path: str | Path,
) -> List[Model]:
    """
    Select models from a schema file by name.

    ``model_names`` wins when non-empty; otherwise the single ``model_name``
    is looked up. Every schema entry with a matching name is returned, in
    request order.

    Raises:
        ModelNotFoundInSchema: If a requested name is absent (or nothing
            was requested)
    """
    try:
        schema = load_schema_file(schema_path)
    except LevoError as e:
        raise e.add_context("Error while reading schema file")

    requested = list(model_names or [])
    if not requested:
        requested = [model_name or ""]

    models = []
    for requested_name in requested:
        found = [model for model in schema.models if model.name == requested_name]
        if not found:
            raise ModelNotFoundInSchema(
                f"Schema {schema_path} does not contain {requested_name}"
            )
        models.extend(found)

    logger.info("Selected %d model(s) from %s", len(models), schema_path)
    return models
