"""Unit tests for writing generated files (levo.codegen.output).

Tests cover:
- Filesystem mode: round trip, base64 marker, permissions
- Overwrite negotiation for each OverwritePolicy
- Failure mid-run (earlier files stay, later files are not written)
- Archive mode: entry names and raw bodies
"""

from __future__ import annotations

import base64
import io
import os
import zipfile
from pathlib import Path

import pytest
from rich.console import Console

from levo.codegen.core import BASE64_MARKER, ArchiveWriteFailure, FileWriteFailure, GeneratedFile
from levo.codegen.output import (
    ARCHIVE_NAME,
    FileMaterializer,
    OverwritePolicy,
    decode_body,
    write_zip_file,
)

pytestmark = pytest.mark.unit

PNG = b"\x89PNG\r\n\x1a\n\x00\xffbinary"

FILES = [
    GeneratedFile("User.java", "", b"class User {}\n"),
    GeneratedFile("Group.java", "models/", b"class Group {}\n"),
    GeneratedFile("logo.png", "res/drawable/", BASE64_MARKER + base64.b64encode(PNG)),
]


def _materializer(base_dir, policy=OverwritePolicy.ASK_ONCE, answers=""):
    output = io.StringIO()
    materializer = FileMaterializer(
        base_dir=base_dir,
        policy=policy,
        input_stream=io.StringIO(answers),
        console=Console(file=output, width=200),
    )
    return materializer, output


def _expected(body: bytes) -> bytes:
    if body.startswith(BASE64_MARKER):
        return base64.b64decode(body[len(BASE64_MARKER):])
    return body


# ---------------------------------------------------------------------------
# Filesystem mode
# ---------------------------------------------------------------------------


class TestWriteFiles:
    def test_round_trip_into_fresh_directory(self, tmp_path):
        materializer, output = _materializer(tmp_path)
        written = materializer.write_files(FILES)

        assert written == [tmp_path / f.directory / f.file_name for f in FILES]
        for generated_file in FILES:
            path = tmp_path / generated_file.directory / generated_file.file_name
            assert path.read_bytes() == _expected(generated_file.body)
        assert output.getvalue() == ""

    def test_base64_payload_is_decoded(self, tmp_path):
        materializer, _ = _materializer(tmp_path)
        materializer.write_files([FILES[2]])
        assert (tmp_path / "res" / "drawable" / "logo.png").read_bytes() == PNG

    def test_body_that_only_mentions_marker_is_verbatim(self, tmp_path):
        body = b"text " + BASE64_MARKER
        materializer, _ = _materializer(tmp_path)
        materializer.write_files([GeneratedFile("notes.txt", "", body)])
        assert (tmp_path / "notes.txt").read_bytes() == body

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_files_are_executable(self, tmp_path):
        materializer, _ = _materializer(tmp_path)
        (path,) = materializer.write_files([FILES[0]])
        assert path.stat().st_mode & 0o777 == 0o755

    def test_working_directory_is_untouched(self, tmp_path):
        before = Path.cwd()
        materializer, _ = _materializer(tmp_path)
        materializer.write_files(FILES)
        assert Path.cwd() == before

    def test_forced_overwrite_is_idempotent_and_silent(self, tmp_path):
        materializer, output = _materializer(tmp_path, OverwritePolicy.ALWAYS_OVERWRITE)
        materializer.write_files(FILES)
        first = {p: p.read_bytes() for p in tmp_path.rglob("*") if p.is_file()}

        materializer.write_files(FILES)
        second = {p: p.read_bytes() for p in tmp_path.rglob("*") if p.is_file()}

        assert first == second
        assert "Overwrite?" not in output.getvalue()

    def test_forced_overwrite_replaces_content(self, tmp_path):
        (tmp_path / "User.java").write_bytes(b"old")
        materializer, _ = _materializer(tmp_path, OverwritePolicy.ALWAYS_OVERWRITE)
        materializer.write_files([FILES[0]])
        assert (tmp_path / "User.java").read_bytes() == FILES[0].body

    def test_directory_creation_failure(self, tmp_path):
        (tmp_path / "models").write_text("a file where a directory should be", encoding="utf-8")
        materializer, _ = _materializer(tmp_path)
        with pytest.raises(FileWriteFailure):
            materializer.write_files([FILES[1]])

    def test_failure_aborts_remaining_writes(self, tmp_path):
        # A directory named like the target file cannot be written over
        (tmp_path / "Broken.java").mkdir()
        files = [
            FILES[0],
            GeneratedFile("Broken.java", "", b"x"),
            GeneratedFile("Later.java", "", b"y"),
        ]
        materializer, _ = _materializer(tmp_path, OverwritePolicy.ALWAYS_OVERWRITE)

        with pytest.raises(FileWriteFailure):
            materializer.write_files(files)

        assert (tmp_path / "User.java").read_bytes() == FILES[0].body
        assert not (tmp_path / "Later.java").exists()

    def test_invalid_base64_payload(self, tmp_path):
        materializer, _ = _materializer(tmp_path)
        with pytest.raises(FileWriteFailure, match="Invalid base64"):
            materializer.write_files([GeneratedFile("x.bin", "", BASE64_MARKER + b"abc")])


# ---------------------------------------------------------------------------
# Overwrite negotiation
# ---------------------------------------------------------------------------


def _existing(tmp_path, *names):
    for name in names:
        (tmp_path / name).write_bytes(b"old")
    return [GeneratedFile(name, "", b"new") for name in names]


class TestOverwritePrompt:
    def test_prompt_text(self, tmp_path):
        files = _existing(tmp_path, "A.java")
        materializer, output = _materializer(tmp_path, answers="n\n")
        materializer.write_files(files)
        assert "The file /A.java already exists. Overwrite? (y/n) :" in output.getvalue()

    def test_first_yes_is_sticky_by_default(self, tmp_path):
        files = _existing(tmp_path, "A.java", "B.java", "C.java")
        materializer, output = _materializer(tmp_path, answers="y\n")

        written = materializer.write_files(files)

        assert len(written) == 3
        assert all((tmp_path / f.file_name).read_bytes() == b"new" for f in files)
        assert output.getvalue().count("Overwrite?") == 1

    def test_no_keeps_asking(self, tmp_path):
        files = _existing(tmp_path, "A.java", "B.java")
        materializer, output = _materializer(tmp_path, answers="n\ny\n")
        materializer.write_files(files)
        assert (tmp_path / "A.java").read_bytes() == b"old"
        assert (tmp_path / "B.java").read_bytes() == b"new"
        assert output.getvalue().count("Overwrite?") == 2

    def test_ask_each_time(self, tmp_path):
        files = _existing(tmp_path, "A.java", "B.java")
        materializer, output = _materializer(
            tmp_path, OverwritePolicy.ASK_EACH_TIME, answers="y\nn\n"
        )
        materializer.write_files(files)
        assert (tmp_path / "A.java").read_bytes() == b"new"
        assert (tmp_path / "B.java").read_bytes() == b"old"
        assert output.getvalue().count("Overwrite?") == 2

    @pytest.mark.parametrize("answer", ["Y\n", "yes\n", " y\n", "y", ""])
    def test_only_exact_y_newline_overwrites(self, tmp_path, answer):
        files = _existing(tmp_path, "A.java")
        materializer, _ = _materializer(tmp_path, answers=answer)
        assert materializer.write_files(files) == []
        assert (tmp_path / "A.java").read_bytes() == b"old"

    def test_new_files_are_written_without_prompt(self, tmp_path):
        files = _existing(tmp_path, "A.java") + [GeneratedFile("B.java", "", b"new")]
        materializer, output = _materializer(tmp_path, answers="n\n")
        written = materializer.write_files(files)
        assert written == [tmp_path / "B.java"]
        assert output.getvalue().count("Overwrite?") == 1

    def test_sticky_answer_does_not_outlive_the_call(self, tmp_path):
        files = _existing(tmp_path, "A.java")
        materializer, output = _materializer(tmp_path, answers="y\nn\n")
        materializer.write_files(files)
        (tmp_path / "A.java").write_bytes(b"edited")
        materializer.write_files(files)
        assert (tmp_path / "A.java").read_bytes() == b"edited"
        assert output.getvalue().count("Overwrite?") == 2


# ---------------------------------------------------------------------------
# Archive mode
# ---------------------------------------------------------------------------


class TestWriteZipFile:
    def test_one_entry_per_file_with_raw_bodies(self, tmp_path):
        path = write_zip_file(FILES, tmp_path)

        assert path == tmp_path / ARCHIVE_NAME
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["User.java", "models/Group.java", "res/drawable/logo.png"]
            for generated_file in FILES:
                assert zf.read(generated_file.directory + generated_file.file_name) == generated_file.body

    def test_no_separator_is_inserted(self, tmp_path):
        path = write_zip_file([GeneratedFile("A.java", "src", b"a")], tmp_path)
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["srcA.java"]

    def test_no_loose_files_are_written(self, tmp_path):
        write_zip_file(FILES, tmp_path)
        assert [p.name for p in tmp_path.iterdir()] == [ARCHIVE_NAME]

    def test_unwritable_destination(self, tmp_path):
        with pytest.raises(ArchiveWriteFailure):
            write_zip_file(FILES, tmp_path / "missing-dir")


class TestDecodeBody:
    def test_plain_body_passes_through(self):
        assert decode_body(b"abc") == b"abc"

    def test_marker_only_decodes_to_empty(self):
        assert decode_body(BASE64_MARKER) == b""

    def test_line_breaks_in_payload_are_ignored(self):
        assert decode_body(BASE64_MARKER + b"aGVs\r\nbG8=\n") == b"hello"

    @pytest.mark.parametrize("payload", [b"!!**aGk=\n", b"aGk=?", b"a Gk="])
    def test_characters_outside_the_alphabet_are_rejected(self, payload):
        with pytest.raises(FileWriteFailure, match="Invalid base64"):
            decode_body(BASE64_MARKER + payload)
