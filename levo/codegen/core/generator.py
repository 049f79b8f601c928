"""
Rendering engine interface and the default Jinja2 implementation.

The pipeline only depends on ``RenderingEngine.process_mappings``; any
object implementing it can be injected, which is how the tests exercise
the pipeline without real templates.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ...logging_config import get_logger
from .context import TEMPLATE_README, GenerationContext, TemplateInfo
from .errors import TemplateError
from .schema import Model
from .templates import TemplateEngine

logger = get_logger(__name__)

BASE64_MARKER = b"<<levobase64>>"
MODEL_NAME_PLACEHOLDER = "_Name_"


@dataclass
class GeneratedFile:
    """One output file produced by a rendering engine."""

    file_name: str
    directory: str = ""
    body: bytes = b""

    @property
    def is_base64(self) -> bool:
        return self.body.startswith(BASE64_MARKER)


class RenderingEngine(ABC):
    """Turns a populated generation context into generated files."""

    @abstractmethod
    def process_mappings(self, context: GenerationContext) -> List[GeneratedFile]:
        """
        Render every mapping of the context.

        Args:
            context: Fully built generation context

        Returns:
            Generated files in output order
        """
        pass


class JinjaRenderingEngine(RenderingEngine):
    """
    Renders ``.lt`` templates with Jinja2.

    Every template of a mapping is rendered once per mapped model, with the
    ``_Name_`` placeholder in its file name (and directory) replaced by the
    model name and the ``.lt`` suffix removed. A template whose name has no
    placeholder is rendered once per mapping with all mapped models.
    Non-template files of the template set are copied as static assets,
    wrapped in the base64 marker so binary content survives.
    """

    def __init__(self, template_engine: Optional[TemplateEngine] = None):
        self.template_engine = template_engine or TemplateEngine()

    def process_mappings(self, context: GenerationContext) -> List[GeneratedFile]:
        generated: List[GeneratedFile] = []
        base_variables = context.as_template_variables()

        for mapping in context.mappings:
            models = [context.model_for_name(name) for name in mapping.model_names]
            if not models:
                continue

            for template_name in mapping.template_names:
                for template in context.templates_for_name(template_name):
                    key = self._register(template)

                    if MODEL_NAME_PLACEHOLDER in template.file_name:
                        for model in models:
                            generated.append(
                                self._render(key, template, base_variables, models, model)
                            )
                    else:
                        generated.append(
                            self._render(key, template, base_variables, models, None)
                        )

        if generated:
            generated.extend(self._static_assets(context))

        logger.info("Rendered %d file(s)", len(generated))
        return generated

    def _register(self, template: TemplateInfo) -> str:
        key = template.key
        try:
            source = template.contents.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateError(f"Template {key} is not valid UTF-8: {e}") from e
        self.template_engine.add_template(key, source)
        return key

    def _render(
        self,
        key: str,
        template: TemplateInfo,
        base_variables: dict,
        models: List[Model],
        model: Optional[Model],
    ) -> GeneratedFile:
        variables = dict(base_variables, models=models, model=model)
        body = self.template_engine.render_template(key, variables)

        model_name = model.name if model else ""
        file_name = template.file_name.replace(MODEL_NAME_PLACEHOLDER, model_name)
        file_name = file_name.removesuffix(".lt")
        directory = template.directory.replace(MODEL_NAME_PLACEHOLDER, model_name)

        logger.debug("Rendered %s%s from %s", directory, file_name, key)
        return GeneratedFile(file_name=file_name, directory=directory, body=body.encode("utf-8"))

    def _static_assets(self, context: GenerationContext) -> List[GeneratedFile]:
        assets = []
        for template in context.templates:
            if template.is_template:
                continue
            if not template.directory and template.file_name == TEMPLATE_README:
                continue
            assets.append(
                GeneratedFile(
                    file_name=template.file_name,
                    directory=template.directory,
                    body=BASE64_MARKER + base64.b64encode(template.contents),
                )
            )
        return assets
