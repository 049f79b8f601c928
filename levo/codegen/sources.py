"""
Template source resolution.

A template path is either local or names a remote repository
(``github.com/owner/repo/templates/android``). Remote repositories are
cloned into, or updated inside, a cache below ``~/.levo`` and the path is
rewritten to point into that cache.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List

from ..logging_config import get_logger
from .core.context import GenerationContext, TemplateInfo
from .core.errors import LevoError, TemplateSourceUnavailable
from .vcs import KNOWN_GIT_HOSTS, repo_root_for_import_path

try:
    import fcntl as _fcntl

    _HAS_FCNTL = True
except ImportError:
    _HAS_FCNTL = False

logger = get_logger(__name__)

if not _HAS_FCNTL:
    logger.warning(
        "fcntl not available (non-POSIX). Template cache locking is disabled; "
        "do not run concurrent levo invocations against the same cache."
    )


def cache_root() -> Path:
    """Directory holding cached template repositories (``$LEVO_HOME`` or ``~/.levo``)."""
    override = os.environ.get("LEVO_HOME")
    if override:
        return Path(override)
    return Path.home() / ".levo"


def remote_hosts() -> List[str]:
    """Hosts whose paths are treated as remote repository references."""
    extra = os.environ.get("LEVO_TEMPLATE_HOSTS", "")
    return list(KNOWN_GIT_HOSTS) + [h.strip() for h in extra.split(",") if h.strip()]


def is_remote_template_path(template_path: str) -> bool:
    return any(template_path.startswith(host + "/") for host in remote_hosts())


def get_updated_template_repo(template_path: str) -> str:
    """
    Resolve a template path, fetching its repository when it is remote.

    Returns:
        The path unchanged when local, otherwise the same path inside the
        template cache

    Raises:
        TemplateSourceUnavailable: If the repository cannot be fetched
    """
    if not is_remote_template_path(template_path):
        return template_path

    root_prefix = cache_root()
    repo_path = "/".join(template_path.split("/")[0:3])
    try:
        get_template_repo(repo_path, root_prefix)
    except LevoError as e:
        raise e.add_context("Template Repo")

    resolved = str(root_prefix / template_path)
    logger.info("Using cached templates at %s", resolved)
    return resolved


def get_template_repo(repo_path: str, root_prefix: Path) -> Path:
    """
    Clone or update the repository serving ``repo_path`` below ``root_prefix``.

    Returns:
        The working copy directory
    """
    repo_root = repo_root_for_import_path(repo_path)
    root = root_prefix / repo_root.root

    if root.exists() and not root.is_dir():
        raise TemplateSourceUnavailable(f"{root} exists but is not a directory")

    try:
        root.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TemplateSourceUnavailable(f"Unable to create {root.parent}: {e}") from e

    with _cache_lock(root):
        if not root.exists():
            logger.info("Cloning %s into %s", repo_root.repo, root)
            repo_root.vcs.create(root, repo_root.repo)
        else:
            logger.info("Updating %s", root)
            repo_root.vcs.download(root)
    return root


@contextmanager
def _cache_lock(root: Path) -> Generator:
    """Hold an exclusive flock on ``<root>.lock`` (POSIX only). No-op elsewhere."""
    lock_path = root.with_name(root.name + ".lock")
    try:
        fh = open(lock_path, "a", encoding="utf-8")
    except OSError as e:
        raise TemplateSourceUnavailable(f"Unable to open cache lock {lock_path}: {e}") from e
    with fh:
        if _HAS_FCNTL:
            _fcntl.flock(fh, _fcntl.LOCK_EX)
        try:
            yield fh
        finally:
            if _HAS_FCNTL:
                _fcntl.flock(fh, _fcntl.LOCK_UN)


def add_template_path(context: GenerationContext, template_path: str | Path) -> List[TemplateInfo]:
    """
    Register a template directory or a single template file on ``context``.

    A template given by direct file path carries no directory information.

    Raises:
        TemplateSourceUnavailable: If the path does not exist
    """
    path = Path(template_path)
    if not path.exists():
        raise TemplateSourceUnavailable(f"Template path not found: {template_path}")

    if path.is_dir():
        return context.add_template_directory(path)

    template = context.add_template_file_path(path)
    template.directory = ""
    return [template]
