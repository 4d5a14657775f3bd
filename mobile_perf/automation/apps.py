"""
Resolve configured app binaries to real local files.

Remote apps (URLs) are downloaded once into a cache directory keyed by a hash
of the URL and reused on later runs. Local apps are resolved against the
directory holding the config file.
"""

from __future__ import annotations

import logging
import os
import zlib
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import requests

from ..app.environment import cache_dir
from ..app.options import AppInfo, path_basename

logger = logging.getLogger(__name__)

Downloader = Callable[[str, Path], None]

_CHUNK_SIZE = 1024 * 1024


def url_hash(url: str) -> str:
    """CRC32 of the URL, rendered as the little-endian hex digest used for cache names."""
    checksum = zlib.crc32(url.encode("utf-8")) & 0xFFFFFFFF
    return checksum.to_bytes(4, "little").hex()


def cache_file_for(url: str, cache_root: Path) -> Path:
    return cache_root / f"{url_hash(url)}-{path_basename(url)}"


def download(url: str, destination: Path) -> None:
    """Stream ``url`` into ``destination``. Errors propagate to the caller."""
    with requests.get(url, stream=True) as response:
        response.raise_for_status()
        with destination.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if chunk:
                    handle.write(chunk)


def _fetch_into_cache(url: str, target: Path, downloader: Downloader) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(f"{target.name}.part")
    logger.info("Downloading %s to %s", url, target)
    try:
        downloader(url, partial)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise
    os.replace(partial, target)


def resolve_app_file(
    app: AppInfo,
    config_dir: Path,
    cache_root: Optional[Path] = None,
    downloader: Optional[Downloader] = None,
) -> Path:
    """Return the canonical absolute path of an existing local copy of ``app``."""
    if app.is_remote:
        target = cache_file_for(app.path, cache_root if cache_root is not None else cache_dir())
        if target.exists():
            logger.debug("Using cached copy of %s at %s", app.path, target)
        else:
            _fetch_into_cache(app.path, target, downloader or download)
        return target.resolve(strict=True)

    app_path = Path(app.path).expanduser()
    if not app_path.is_absolute():
        app_path = config_dir / app_path
    return app_path.resolve(strict=True)


def resolve_apps(
    apps: Iterable[AppInfo],
    config_dir: Path,
    cache_root: Optional[Path] = None,
    downloader: Optional[Downloader] = None,
) -> List[AppInfo]:
    """Resolve every app in order, returning copies with ``file`` filled in."""
    resolved: List[AppInfo] = []
    for app in apps:
        if app.file is not None:
            resolved.append(app)
            continue
        file = resolve_app_file(app, config_dir, cache_root=cache_root, downloader=downloader)
        logger.debug("Resolved app %s (%s) to %s", app.name, app.path, file)
        resolved.append(replace(app, file=file))
    return resolved
