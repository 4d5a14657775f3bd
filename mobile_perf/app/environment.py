# mobile_perf/app/environment.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_CONFIG_PATH = Path("./tests/android.yml")
CACHE_DIR_NAME = ".cache"


@dataclass(frozen=True, slots=True)
class CIEnvironment:
    """Continuous-integration metadata read from the process environment."""

    is_ci: bool = False
    repository: Optional[str] = None
    ref: Optional[str] = None
    run_id: Optional[str] = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> CIEnvironment:
        source = os.environ if env is None else env
        return cls(
            is_ci="CI" in source,
            repository=source.get("GITHUB_REPOSITORY"),
            ref=source.get("GITHUB_REF"),
            run_id=source.get("GITHUB_RUN_ID"),
        )

    @property
    def run_kind(self) -> str:
        return "ci" if self.is_ci else "local"

    def build_label(self, now: Optional[datetime] = None) -> str:
        """Return the build label shown in the device cloud dashboard."""
        if self.is_ci:
            return f"CI {self.repository} {self.ref} {self.run_id}"
        stamp = (now or datetime.now()).isoformat()
        return f"Local build {stamp}"


def config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the config file location, honouring the TEST_CONFIG override."""
    source = os.environ if env is None else env
    override = source.get("TEST_CONFIG")
    return Path(override) if override else DEFAULT_CONFIG_PATH


def cache_dir(cwd: Optional[Path] = None) -> Path:
    """Directory holding downloaded app binaries, shared across runs."""
    return (cwd or Path.cwd()) / CACHE_DIR_NAME
