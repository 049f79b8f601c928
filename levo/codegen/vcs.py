"""
Version control support for remote template repositories.

Maps an import-style path (``github.com/owner/repo``) to the VCS and clone
URL that serve it, and runs the clone/update commands for that VCS.
"""

import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import requests

from ..logging_config import get_logger
from .core.errors import TemplateSourceUnavailable

logger = get_logger(__name__)

# Hosts whose repositories are always git over https
KNOWN_GIT_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

GO_IMPORT_META = re.compile(
    r"""<meta\s+name=["']go-import["']\s+content=["']([^"']+)["']""", re.IGNORECASE
)


@dataclass(frozen=True)
class VcsCommand:
    """Commands that create and update a working copy for one VCS."""

    name: str
    cmd: str
    create_args: List[str]  # Formatted with {repo} and {dir}
    download_args: List[str]

    def create(self, directory: Path, repo: str):
        """Clone ``repo`` into ``directory``."""
        args = [a.format(repo=repo, dir=str(directory)) for a in self.create_args]
        _run_vcs([self.cmd, *args], cwd=directory.parent)

    def download(self, directory: Path):
        """Bring an existing working copy up to date."""
        _run_vcs([self.cmd, *self.download_args], cwd=directory)


VCS_COMMANDS: Dict[str, VcsCommand] = {
    "git": VcsCommand(
        name="Git",
        cmd="git",
        create_args=["clone", "{repo}", "{dir}"],
        download_args=["pull", "--ff-only"],
    ),
    "hg": VcsCommand(
        name="Mercurial",
        cmd="hg",
        create_args=["clone", "{repo}", "{dir}"],
        download_args=["pull", "-u"],
    ),
}


@dataclass(frozen=True)
class RepoRoot:
    """Where a repository lives and how to fetch it."""

    vcs: VcsCommand
    repo: str  # Clone URL
    root: str  # Import path prefix, e.g. github.com/owner/repo


def repo_root_for_import_path(import_path: str) -> RepoRoot:
    """
    Resolve the repository serving ``import_path``.

    Well-known hosts map straight to git over https; any other host is asked
    through the ``?go-get=1`` ``go-import`` meta tag convention.

    Raises:
        TemplateSourceUnavailable: If the path cannot be resolved
    """
    parts = import_path.strip("/").split("/")
    if len(parts) < 3 or not all(parts[:3]):
        raise TemplateSourceUnavailable(
            f"Repository path must have the form host/owner/repo: {import_path}"
        )
    root = "/".join(parts[:3])

    if parts[0] in KNOWN_GIT_HOSTS:
        return RepoRoot(vcs=VCS_COMMANDS["git"], repo=f"https://{root}", root=root)

    return _discover_repo_root(root)


def _discover_repo_root(root: str) -> RepoRoot:
    url = f"https://{root}?go-get=1"
    timeout = float(os.environ.get("LEVO_VCS_TIMEOUT", "30"))
    logger.debug("Discovering repository for %s via %s", root, url)

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("Repository discovery failed for %s: %s", root, e)
        raise TemplateSourceUnavailable(f"Unable to discover repository for {root}: {e}") from e

    for content in GO_IMPORT_META.findall(response.text):
        fields = content.split()
        if len(fields) != 3:
            continue
        prefix, vcs_name, repo = fields
        if not (root == prefix or root.startswith(prefix + "/")):
            continue
        vcs = VCS_COMMANDS.get(vcs_name)
        if vcs is None:
            raise TemplateSourceUnavailable(f"Unsupported version control system: {vcs_name}")
        return RepoRoot(vcs=vcs, repo=repo, root=prefix)

    raise TemplateSourceUnavailable(f"No go-import meta tag found for {root}")


def _run_vcs(command: List[str], cwd: Path):
    logger.info("Running %s", " ".join(command))
    try:
        subprocess.run(
            command,
            cwd=str(cwd),
            check=True,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as e:
        raise TemplateSourceUnavailable(f"{command[0]} is not installed: {e}") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise TemplateSourceUnavailable(
            f"{' '.join(command)} failed (exit {e.returncode}): {stderr}"
        ) from e
