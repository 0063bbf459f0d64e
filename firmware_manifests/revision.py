"""
Resolve the commit that published firmware files are served from.

Download URLs pin a commit so they keep working after the branch moves on.
The lookup is best effort: when neither git nor the GitHub API can answer,
the caller falls back to the branch name.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

import requests

from .config import Settings
from .logutil import log_skip

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
USER_AGENT = "firmware-manifests/1.0"


class RevisionLookupError(RuntimeError):
    pass


def _git(args: List[str], settings: Settings) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=settings.repo_root,
            capture_output=True,
            text=True,
            timeout=settings.git_timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise RevisionLookupError(f"git {args[0]} timed out after {exc.timeout}s") from exc
    except OSError as exc:
        raise RevisionLookupError(f"git is not available: {exc}") from exc
    if result.returncode != 0:
        raise RevisionLookupError(
            f"git {' '.join(args)} failed: {result.stderr.strip() or result.returncode}"
        )
    return result.stdout.strip()


def git_revision(settings: Settings) -> str:
    _git(["fetch", settings.remote], settings)
    sha = _git(["rev-parse", f"{settings.remote}/{settings.branch}"], settings)
    if not sha:
        raise RevisionLookupError("git rev-parse returned nothing")
    return sha


def github_revision(settings: Settings) -> str:
    url = f"{GITHUB_API}/repos/{settings.repository}/commits/{settings.branch}"
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"
    try:
        response = requests.get(url, headers=headers, timeout=settings.api_timeout)
        response.raise_for_status()
        sha = response.json().get("sha")
    except (requests.RequestException, ValueError) as exc:
        raise RevisionLookupError(f"GitHub API lookup failed: {exc}") from exc
    if not sha:
        raise RevisionLookupError("GitHub API response did not include a commit sha")
    return sha


def lookup_revision(settings: Settings) -> Optional[str]:
    """Return the commit sha of ``<remote>/<branch>`` or ``None``."""
    if settings.revision:
        return settings.revision
    try:
        return git_revision(settings)
    except RevisionLookupError as exc:
        if not settings.api_fallback:
            log_skip(
                logger,
                "Failed to fetch git sha of %s/%s: %s",
                settings.remote,
                settings.branch,
                exc,
                level=logging.ERROR,
            )
            return None
        logger.warning("Failed to fetch git sha locally, asking GitHub: %s", exc)
    try:
        return github_revision(settings)
    except RevisionLookupError as exc:
        log_skip(
            logger,
            "Failed to fetch git sha of %s@%s: %s",
            settings.repository,
            settings.branch,
            exc,
            level=logging.ERROR,
        )
        return None
