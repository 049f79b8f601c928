"""
Template feature flags.

A template set documents its optional features in its ``README.md`` as
``#### <FeatureName>`` headings followed by a description block. Feature
tokens given on the command line are applied against that list.
"""

import re
from pathlib import Path
from typing import Iterable, List, Tuple

from ..logging_config import get_logger
from .core.context import TEMPLATE_README, GenerationContext
from .core.errors import NoFeatureFlagsDocumented

logger = get_logger(__name__)

FEATURE_HEADING = re.compile(r"#### *([A-Za-z]+)\n((?:[^\n]+\n)*)")

ALL_FEATURES = "all"
NO_FEATURES = "none"


def readme_path_for(template_path: str | Path) -> Path:
    """README of a template set: inside a directory, or beside a single file."""
    path = Path(template_path)
    if path.is_file():
        path = path.parent
    return path / TEMPLATE_README


def get_template_features_from_readme(template_path: str | Path) -> List[Tuple[str, str]]:
    """
    List the features documented by a template set.

    Returns:
        ``(name, description)`` pairs in document order

    Raises:
        NoFeatureFlagsDocumented: If the README is unreadable or has no headings
    """
    readme = readme_path_for(template_path)
    try:
        contents = readme.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise NoFeatureFlagsDocumented(f"No template flags found in {readme}: {e}") from e

    features = [(m.group(1), m.group(2)) for m in FEATURE_HEADING.finditer(contents)]
    if not features:
        raise NoFeatureFlagsDocumented(f"No template flags found in {readme}")

    logger.debug("Found %d documented feature(s) in %s", len(features), readme)
    return features


def apply_feature_tokens(
    context: GenerationContext, feature_tokens: Iterable[str], template_path: str | Path
):
    """
    Apply feature tokens to ``context`` in order.

    ``all`` enables every documented feature and ``none`` disables them;
    ``-name`` disables one feature, ``+name`` or a bare ``name`` enables it.
    """
    for token in feature_tokens:
        if not token:
            continue
        if token == ALL_FEATURES:
            for name, _ in get_template_features_from_readme(template_path):
                context.add_template_feature(name)
        elif token == NO_FEATURES:
            for name, _ in get_template_features_from_readme(template_path):
                context.remove_template_feature(name)
        elif token.startswith("-"):
            context.remove_template_feature(token[1:])
        elif token.startswith("+"):
            context.add_template_feature(token[1:])
        else:
            context.add_template_feature(token)

    logger.debug("Enabled features: %s", context.features)
