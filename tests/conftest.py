"""Shared pytest fixtures for the levo test suite.

Provides reusable fixtures for:
- Schema and configuration documents written to ``tmp_path``
- A small template set (templates, static asset, feature README)
- A stub rendering engine that records the context it was given
- An isolated template cache (``LEVO_HOME``)
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from levo.codegen.core import GeneratedFile, GenerationContext, RenderingEngine


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

PIZZA_SCHEMA: Dict[str, Any] = {
    "Project": "PizzaShop",
    "Models": [
        {
            "Name": "Product",
            "Parent": "",
            "Properties": [
                {"RemoteIdentifier": "Name", "PropertyType": "string"},
                {"RemoteIdentifier": "Price", "PropertyType": "string"},
            ],
        },
        {
            "Name": "Pizza",
            "Parent": "Product",
            "Properties": [
                {
                    "RemoteIdentifier": "Toppings",
                    "LocalIdentifier": "toppingList",
                    "PropertyType": "[]Topping",
                },
            ],
        },
        {
            "Name": "Topping",
            "Parent": "",
            "Properties": [{"RemoteIdentifier": "Name", "PropertyType": "string"}],
        },
    ],
}


@pytest.fixture
def write_schema(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a schema document; defaults to the pizza schema."""

    def _write(data: Any = None, name: str = "schema.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(PIZZA_SCHEMA if data is None else data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def schema_file(write_schema) -> Path:
    return write_schema()


@pytest.fixture
def write_config(tmp_path: Path, schema_file: Path, template_dir: Path) -> Callable[..., Path]:
    """Factory writing a configuration document.

    Keyword arguments override top-level fields; a value of ``None`` removes
    the field.
    """

    def _write(name: str = "config.json", **overrides: Any) -> Path:
        data: Dict[str, Any] = {
            "TemplaterVersion": "1.0",
            "BasePackage": "com.pizzashop",
            "Language": "java",
            "ModelSchemaFileName": str(schema_file),
            "TemplatesDirectory": str(template_dir),
            "Mappings": [
                {"ModelNames": ["Pizza", "Topping"], "TemplateNames": ["_Name_.java.lt"]},
            ],
        }
        for key, value in overrides.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Template sets
# ---------------------------------------------------------------------------

MODEL_TEMPLATE = textwrap.dedent(
    """\
    package {{ package_name }};

    public class {{ model.name }}{% if model.parent %} extends {{ model.parent }}{% endif %} {
    {% for prop in model.properties %}
        private {{ prop.property_type }} {{ prop.local_identifier | camel_case }};
    {% endfor %}
    {% if "Getters" in features %}
        // getters
    {% endif %}
    }
    """
)

INDEX_TEMPLATE = textwrap.dedent(
    """\
    {% for model in models %}
    {{ model.name }}
    {% endfor %}
    """
)

FEATURES_README = textwrap.dedent(
    """\
    # Test templates

    #### Getters
    Adds getters.

    #### Builders
    Adds a builder
    for every model.
    """
)

LOGO_BYTES = b"\x89PNG\r\n\x1a\n\x00\x01binary"


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template set with a per-model template, a static asset and a README."""
    root = tmp_path / "templates"
    (root / "res").mkdir(parents=True)
    (root / "_Name_.java.lt").write_text(MODEL_TEMPLATE, encoding="utf-8")
    (root / "README.md").write_text(FEATURES_README, encoding="utf-8")
    (root / "res" / "logo.png").write_bytes(LOGO_BYTES)
    return root


@pytest.fixture
def single_template(tmp_path: Path) -> Path:
    """A template set reduced to one template file, with a README beside it."""
    root = tmp_path / "single"
    root.mkdir()
    (root / "README.md").write_text(FEATURES_README, encoding="utf-8")
    path = root / "_Name_.java.lt"
    path.write_text(MODEL_TEMPLATE, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Rendering engine stand-in
# ---------------------------------------------------------------------------


class StubEngine(RenderingEngine):
    """Emits one file per (template, model) pair and remembers the context."""

    def __init__(self, files: List[GeneratedFile] | None = None):
        self.contexts: List[GenerationContext] = []
        self.files = files

    def process_mappings(self, context: GenerationContext) -> List[GeneratedFile]:
        self.contexts.append(context)
        if self.files is not None:
            return list(self.files)
        generated = []
        for mapping in context.mappings:
            for template_name in mapping.template_names:
                for model_name in mapping.model_names:
                    generated.append(
                        GeneratedFile(
                            file_name=f"{model_name}-{template_name}",
                            directory="out/",
                            body=f"{context.package_name}:{model_name}".encode("utf-8"),
                        )
                    )
        return generated

    @property
    def context(self) -> GenerationContext:
        return self.contexts[-1]


@pytest.fixture
def stub_engine() -> StubEngine:
    return StubEngine()


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture
def levo_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the template cache at a temporary directory."""
    home = tmp_path / "levo-home"
    monkeypatch.setenv("LEVO_HOME", str(home))
    monkeypatch.delenv("LEVO_TEMPLATE_HOSTS", raising=False)
    return home
