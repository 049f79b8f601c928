"""
Command-line entry point for levo.

Parses flags into an immutable ``CLIOptions`` value, checks that the flag
combination makes sense and hands over to ``CLIHandler``.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from rich.console import Console

from .cli import CLIHandler
from .codegen.output import OverwritePolicy
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)

USAGE_EXIT_CODE = 2


@dataclass(frozen=True)
class CLIOptions:
    """Everything the command line asked for."""

    config: str = ""
    project: str = ""
    package: str = ""
    name: str = ""
    names: Tuple[str, ...] = ()
    models: Tuple[str, ...] = ()
    schema: str = ""
    template: str = ""
    list_features: bool = False
    features: Tuple[str, ...] = ()
    zip_output: bool = False
    quiet: bool = False
    ask: bool = False
    version: bool = False
    example: bool = False
    output_dir: str = "."
    verbose: bool = False

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> "CLIOptions":
        return cls(
            config=args.config or "",
            project=args.project or "",
            package=args.package or "",
            name=args.name or "",
            names=tuple(args.names or ()),
            models=tuple(args.model or ()),
            schema=args.schema or "",
            template=args.template or "",
            list_features=args.list,
            features=tuple(args.features or ()),
            zip_output=args.zip,
            quiet=args.quiet,
            ask=args.ask,
            version=args.version,
            example=args.example,
            output_dir=args.output_dir,
            verbose=args.verbose,
        )

    @property
    def overwrite_policy(self) -> OverwritePolicy:
        if self.quiet:
            return OverwritePolicy.ALWAYS_OVERWRITE
        if self.ask:
            return OverwritePolicy.ASK_EACH_TIME
        return OverwritePolicy.ASK_ONCE


def _comma_list(value: str) -> List[str]:
    """``"a, b,c"`` -> ``["a", "b", "c"]``; spaces are dropped, not trimmed."""
    return value.replace(" ", "").split(",")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="levo",
        description="Generate source files from models and a set of templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  levo [options] --config <file_path>
  levo [options] --model <model_def> [--model <model_def>] --template <file_path>
  levo [options] (--name <model_name> | --names <model_name,...>) --schema <file_path> --template <file_path>
  levo --template <file_path> --list
  levo --example
        """.strip(),
    )

    # Inputs
    input_group = parser.add_argument_group("arguments")
    input_group.add_argument(
        "--config", "-c", metavar="FILE", help="The full path to your configuration file"
    )
    input_group.add_argument(
        "--name", "-n", metavar="MODEL_NAME", help="The name of a model in the schema"
    )
    input_group.add_argument(
        "--names",
        "-N",
        metavar="MODEL_NAME,...",
        type=_comma_list,
        help="The names of some models in the schema",
    )
    input_group.add_argument(
        "--model",
        "-m",
        metavar="MODEL_DEF",
        action="append",
        help=(
            "A model definition with the format "
            "model_name[ property_name:primitive_type][...]. It must be quoted, "
            'eg. "User FirstName:string Age:int Password:string"'
        ),
    )
    input_group.add_argument("--schema", "-s", metavar="FILE", help="The full path to the schema")
    input_group.add_argument(
        "--template",
        "-t",
        metavar="PATH",
        help="The full path to the template file or directory, or a remote repository path",
    )

    # Options
    options_group = parser.add_argument_group("options")
    options_group.add_argument(
        "--list",
        action="store_true",
        help="Together with --template, describe the optional features of that template set",
    )
    options_group.add_argument(
        "--features",
        "-f",
        metavar="all,none,[+|-]FEATURE",
        type=_comma_list,
        help=(
            "[Un]set optional template features. 'all' and 'none' work as expected; "
            "a leading '-' or '+' unsets or sets the feature"
        ),
    )
    options_group.add_argument(
        "--zip", "-z", action="store_true", help="Write a zip archive instead of separate files"
    )
    options_group.add_argument(
        "--quiet", "-q", action="store_true", help="Overwrite existing files without asking"
    )
    options_group.add_argument(
        "--ask",
        "-a",
        action="store_true",
        help="Ask before overwriting every file (default: ask once and reuse the answer)",
    )
    options_group.add_argument(
        "--version", "-v", action="store_true", help="Show version information and exit"
    )
    options_group.add_argument(
        "--project", "-p", metavar="PROJECT_NAME", help="Project name used by the templates"
    )
    options_group.add_argument(
        "--package", "-k", metavar="PACKAGE", help="Package string used by the templates"
    )
    options_group.add_argument(
        "--output-dir",
        "-o",
        metavar="DIR",
        default=".",
        help="Directory to write generated files into (default: .)",
    )
    options_group.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )

    example_group = parser.add_argument_group("example")
    example_group.add_argument(
        "--example",
        action="store_true",
        help="Ignore other flags and create an example workspace in ./example",
    )

    return parser


def check_flags(options: CLIOptions) -> Optional[str]:
    """
    Validate the flag combination.

    Returns:
        ``None`` when the flags are usable, otherwise the message to print
        before the usage text (empty when only the usage should be shown)
    """
    if options.version or options.example:
        return None

    has_names = bool(options.names)
    if options.config and (
        options.models or options.name or has_names or options.schema or options.template
    ):
        return "When using --config, do not also use --model, --name, --names, --schema, or --template"
    if options.models and not options.template:
        return "When using --model, --template must also be used"
    if options.name and not (options.template and options.schema):
        return "When using --name, both --template and --schema must also be used"
    if has_names and not (options.template and options.schema):
        return "When using --names, both --template and --schema must also be used"
    if options.schema and (not options.template or not (options.name or has_names)):
        return "When using --schema, --template and one of --name or --names must also be used"
    if options.quiet and options.ask:
        return "--quiet and --ask are mutually exclusive"
    if not (options.config or options.models or options.name or has_names or options.template):
        return ""
    if options.list_features and not options.template:
        return "--list must be used in conjunction with --template"
    return None


def parse_options(argv: Optional[List[str]] = None) -> CLIOptions:
    return CLIOptions.from_namespace(build_parser().parse_args(argv))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run levo.

    Returns:
        Exit code: 0 on success, 1 when generation fails, 2 for bad flags
    """
    parser = build_parser()
    options = CLIOptions.from_namespace(parser.parse_args(argv))
    setup_logging(logging.DEBUG if options.verbose else logging.WARNING)

    problem = check_flags(options)
    if problem is not None:
        if problem:
            Console(stderr=True).print(f"[red]✗[/red] {problem}", highlight=False)
        parser.print_help(sys.stderr)
        logger.debug("Rejected flag combination: %s", options)
        return USAGE_EXIT_CODE

    return CLIHandler().run(options)


if __name__ == "__main__":
    sys.exit(main())
