from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from . import __version__
from .codegen.core.errors import LevoError
from .codegen.core.generator import RenderingEngine
from .codegen.features import get_template_features_from_readme
from .codegen.models import process_models_from_schema, process_raw_models
from .codegen.output import FileMaterializer, write_zip_file
from .codegen.pipeline import (
    GenerationResult,
    generate_from_configuration,
    generate_models_and_templates,
)
from .codegen.sources import get_updated_template_repo
from .example import ExampleDeclined, output_example_workspace
from .logging_config import get_logger

if TYPE_CHECKING:
    from .main import CLIOptions

logger = get_logger(__name__)


class CLIHandler:
    """Dispatch a parsed command line to the matching generation mode."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        engine: Optional[RenderingEngine] = None,
        input_stream: Optional[TextIO] = None,
    ) -> None:
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.engine = engine
        self.input_stream = input_stream or sys.stdin
        logger.debug("CLIHandler initialized")

    def run(self, options: CLIOptions) -> int:
        """Generate and write files for ``options``.

        Args:
            options: Parsed and checked command line.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        try:
            result = self.process_args(options)
            if result.files:
                self._write_output(result, options)
        except LevoError as e:
            self.error_console.print(f"[red]✗[/red] {escape(str(e))}", highlight=False)
            logger.debug("Run failed at stages %s", e.stages)
            return 1
        return 0

    def process_args(self, options: CLIOptions) -> GenerationResult:
        """Run the first mode the options select.

        Informational modes (version, example, feature listing) print and
        return an empty result.
        """
        if options.version:
            self.console.print(f"levo version {__version__}", highlight=False)
            return GenerationResult()

        if options.example:
            self._handle_example(options)
            return GenerationResult()

        template_path = get_updated_template_repo(options.template)

        if options.list_features and template_path:
            self._handle_list(template_path)
            return GenerationResult()

        if options.config:
            try:
                return generate_from_configuration(options.config, engine=self.engine)
            except LevoError as e:
                raise e.add_context("Error reading config")

        if options.models:
            models = process_raw_models(options.models)
        elif options.name or options.names:
            models = process_models_from_schema(options.name, options.names, options.schema)
        elif template_path:
            models = []
        else:
            raise LevoError("Unhandled request")

        return generate_models_and_templates(
            models,
            template_path,
            feature_tokens=options.features,
            package_name=options.package,
            project_name=options.project,
            engine=self.engine,
        )

    def _handle_example(self, options: CLIOptions) -> None:
        try:
            output_example_workspace(
                options.output_dir, console=self.console, input_stream=self.input_stream
            )
        except ExampleDeclined:
            raise LevoError("Example files not created") from None
        except LevoError as e:
            raise e.add_context("Error creating example files")

        self.console.print(
            "Successfully created example directory.\n"
            "Enter that directory, take a look, and then try 'levo --config config.json'",
            highlight=False,
        )

    def _handle_list(self, template_path: str) -> None:
        for name, description in get_template_features_from_readme(template_path):
            self.console.print(f"{name}:\n{description}", markup=False, highlight=False)
        logger.info("Listed features of %s", template_path)

    def _write_output(self, result: GenerationResult, options: CLIOptions) -> List:
        if options.zip_output or result.zip_output:
            try:
                path = write_zip_file(result.files, options.output_dir)
            except LevoError as e:
                raise e.add_context("Error writing zip")
            self.console.print(f"✅ [green]Wrote {escape(str(path))}[/green]")
            return [path]

        materializer = FileMaterializer(
            base_dir=options.output_dir,
            policy=options.overwrite_policy,
            input_stream=self.input_stream,
            console=self.console,
        )
        try:
            written = materializer.write_files(result.files)
        except LevoError as e:
            raise e.add_context("Error writing files")
        self.console.print(f"✅ [green]Wrote {len(written)} file(s)[/green]")
        return written
