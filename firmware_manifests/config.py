from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_REPOSITORY = "jascoproducts/firmware"
DEFAULT_FIRMWARE_DIR = "zwave"
DEFAULT_OUT_DIR = "out"
DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"
DEFAULT_GIT_TIMEOUT = 60.0
DEFAULT_API_TIMEOUT = 15.0

RAW_URL_TEMPLATE = "https://raw.githubusercontent.com/{repository}/{revision}/{path}"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration for one manifest build."""

    repo_root: Path
    firmware_dir: Path
    out_dir: Path
    repository: str = DEFAULT_REPOSITORY
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    revision: Optional[str] = None
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    api_fallback: bool = True
    api_timeout: float = DEFAULT_API_TIMEOUT
    token: Optional[str] = None
    dry_run: bool = False

    @property
    def url_prefix(self) -> str:
        """Path of the firmware directory inside the published repository."""
        try:
            relative = self.firmware_dir.relative_to(self.repo_root)
        except ValueError:
            relative = Path(self.firmware_dir.name)
        return relative.as_posix().strip("/")

    @classmethod
    def from_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        repo_root = Path(args.repo_root).resolve()
        repository = (
            args.repository or environ.get("GITHUB_REPOSITORY") or DEFAULT_REPOSITORY
        )
        token = environ.get("GITHUB_TOKEN") or environ.get("GH_TOKEN")
        return cls(
            repo_root=repo_root,
            firmware_dir=(repo_root / args.firmware_dir).resolve(),
            out_dir=(repo_root / args.out_dir).resolve(),
            repository=repository,
            remote=args.remote,
            branch=args.branch,
            revision=args.revision,
            git_timeout=args.git_timeout,
            api_fallback=not args.no_api_fallback,
            token=token,
            dry_run=args.dry_run,
        )
