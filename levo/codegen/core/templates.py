"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

import re
from typing import Any, Dict

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError as JinjaTemplateError

from .errors import TemplateError


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self):
        self._env = Environment(
            loader=DictLoader({}),
            autoescape=False,
            keep_trailing_newline=True,
            lstrip_blocks=True,
            trim_blocks=True,
            undefined=StrictUndefined,
        )

        # Custom filters for code generation
        self._env.filters["snake_case"] = snake_case
        self._env.filters["camel_case"] = camel_case
        self._env.filters["pascal_case"] = pascal_case
        self._env.tests["list_type"] = _is_list_type

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        self._env.loader.mapping[name] = content

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a previously added template with the given context.

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e


# Template filters for code generation


def snake_case(value: str) -> str:
    """Convert string to snake_case."""
    # Insert underscore before uppercase letters
    s1 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", str(value))
    # Replace spaces and hyphens with underscores
    s2 = re.sub(r"[-\s]+", "_", s1)
    return s2.lower()


def camel_case(value: str) -> str:
    """Convert string to camelCase."""
    parts = snake_case(value).split("_")
    if not parts:
        return str(value)
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def pascal_case(value: str) -> str:
    """Convert string to PascalCase."""
    return "".join(p.capitalize() for p in snake_case(value).split("_") if p)


def _is_list_type(value: Any) -> bool:
    """Jinja test: ``{% if prop is list_type %}`` for ``[]Element`` types."""
    type_name = getattr(value, "property_type", value)
    return isinstance(type_name, str) and type_name.startswith("[]")
