"""Utility functions for loading JSON documents.

Configuration and schema files are both plain JSON; this module reads them
with consistent error handling and logging.
"""

import json
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)


class JSONLoaderError(Exception):
    """Custom exception for JSON loading errors."""

    pass


def read_bytes(file_path: str | Path) -> bytes:
    """Read a whole file, converting I/O failures to ``JSONLoaderError``."""
    file_path = Path(file_path)
    logger.debug("Reading file: %s", file_path)
    try:
        return file_path.read_bytes()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise JSONLoaderError(f"Error reading file {file_path}: {e}") from e


def parse_json(contents: bytes | str, source: str = "<string>") -> Any:
    """Decode a JSON document.

    Args:
        contents: Raw document.
        source: Name used in error messages.

    Raises:
        JSONLoaderError: If the document is not valid JSON.
    """
    try:
        return json.loads(contents)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("Invalid JSON in %s: %s", source, e)
        raise JSONLoaderError(f"Invalid JSON in {source}: {e}") from e


def load_json_from_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Parsed JSON data.

    Raises:
        JSONLoaderError: If the file cannot be read or the JSON is invalid.
    """
    file_path = Path(file_path)

    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        raise JSONLoaderError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        # Don't raise, might still be valid JSON
        logger.warning("File does not have .json extension: %s", file_path)

    data = parse_json(read_bytes(file_path), str(file_path))
    logger.info("Loaded JSON from %s", file_path)
    return data
