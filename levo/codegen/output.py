"""
Writing generated files.

Generated files are either written below an output directory, negotiating
overwrites of existing files with the user, or packed into a single zip
archive.
"""

import base64
import binascii
import io
import os
import sys
import zipfile
from enum import Enum
from pathlib import Path
from typing import List, Optional, TextIO

from rich.console import Console

from ..logging_config import get_logger
from .core.errors import ArchiveWriteFailure, FileWriteFailure
from .core.generator import BASE64_MARKER, GeneratedFile

logger = get_logger(__name__)

ARCHIVE_NAME = "levo_gen.zip"
FILE_MODE = 0o755


class OverwritePolicy(Enum):
    """How to handle a generated file that already exists."""

    ASK_ONCE = "ask_once"  # First "y" answer applies to the rest of the run
    ASK_EACH_TIME = "ask_each_time"
    ALWAYS_OVERWRITE = "always_overwrite"


class FileMaterializer:
    """Writes generated files below a base directory."""

    def __init__(
        self,
        base_dir: str | Path = ".",
        policy: OverwritePolicy = OverwritePolicy.ASK_ONCE,
        input_stream: Optional[TextIO] = None,
        console: Optional[Console] = None,
    ):
        self.base_dir = Path(base_dir)
        self.policy = policy
        self.input_stream = input_stream or sys.stdin
        self.console = console or Console()

    def write_files(self, generated_files: List[GeneratedFile]) -> List[Path]:
        """
        Write every file in order.

        Stops at the first failure; files written before it stay on disk.

        Returns:
            Paths actually written (declined overwrites are skipped)

        Raises:
            FileWriteFailure: If a directory or file cannot be written
        """
        overwrite = self.policy is OverwritePolicy.ALWAYS_OVERWRITE
        written = []

        for generated_file in generated_files:
            target_dir = self.base_dir / generated_file.directory
            try:
                target_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileWriteFailure(f"Unable to create directory {target_dir}: {e}") from e

            path = target_dir / generated_file.file_name
            if path.exists() and not overwrite:
                if not self._confirm_overwrite(generated_file):
                    logger.warning("Skipped existing file %s", path)
                    continue
                if self.policy is not OverwritePolicy.ASK_EACH_TIME:
                    overwrite = True

            write_file(path, generated_file.body)
            written.append(path)

        logger.info("Wrote %d file(s) below %s", len(written), self.base_dir)
        return written

    def _confirm_overwrite(self, generated_file: GeneratedFile) -> bool:
        self.console.print(
            f"The file {generated_file.directory}/{generated_file.file_name} already exists. "
            "Overwrite? (y/n) : ",
            end="",
            markup=False,
            highlight=False,
        )
        answer = self.input_stream.readline()
        return answer == "y\n"


def decode_body(body: bytes) -> bytes:
    """Strip and decode the base64 marker convention; other bodies pass through."""
    if not body.startswith(BASE64_MARKER):
        return body
    # Line breaks are allowed inside the payload, nothing else outside the alphabet
    payload = body[len(BASE64_MARKER):].replace(b"\r", b"").replace(b"\n", b"")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FileWriteFailure(f"Invalid base64 payload: {e}") from e


def write_file(path: str | Path, contents: bytes):
    """
    Write one generated body to ``path`` with mode ``0o755``.

    Raises:
        FileWriteFailure: If the payload cannot be decoded or written
    """
    path = Path(path)
    data = decode_body(contents)
    try:
        path.write_bytes(data)
        os.chmod(path, FILE_MODE)
    except OSError as e:
        logger.error("Error writing file %s: %s", path, e)
        raise FileWriteFailure(f"Unable to write {path}: {e}") from e
    logger.debug("Wrote %s (%d bytes)", path, len(data))


def write_zip_file(generated_files: List[GeneratedFile], base_dir: str | Path = ".") -> Path:
    """
    Pack every generated file into ``levo_gen.zip``.

    Entry names are ``directory + file_name``; bodies are stored verbatim.

    Returns:
        Path of the written archive

    Raises:
        ArchiveWriteFailure: If the archive cannot be built or saved
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for generated_file in generated_files:
                zf.writestr(generated_file.directory + generated_file.file_name, generated_file.body)
    except (zipfile.BadZipFile, ValueError, OSError) as e:
        raise ArchiveWriteFailure(f"Unable to build archive: {e}") from e

    zip_path = Path(base_dir) / ARCHIVE_NAME
    try:
        zip_path.write_bytes(buffer.getvalue())
    except OSError as e:
        logger.error("Error writing archive %s: %s", zip_path, e)
        raise ArchiveWriteFailure(f"Unable to write {zip_path}: {e}") from e

    logger.info("Wrote %d file(s) to %s", len(generated_files), zip_path)
    return zip_path
