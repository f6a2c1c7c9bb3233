from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from .errors import FilesystemError
from .types import LICENSE_FILE_PREFIXES, Package

logger = logging.getLogger(__name__)


def _declared_license_path(manifest_dir: Path, license_file: Optional[str]) -> Optional[Path]:
    if not license_file:
        return None
    candidate = Path(os.path.normpath(manifest_dir / license_file))
    if candidate.is_file():
        return candidate
    logger.info("declared license file %s does not exist; skipping", candidate)
    return None


def _scan_directory(manifest_dir: Path, prefixes: Iterable[str]) -> list[Path]:
    prefixes = tuple(prefixes)
    try:
        with os.scandir(manifest_dir) as entries:
            return [
                Path(os.path.normpath(entry.path))
                for entry in entries
                if entry.name.startswith(prefixes) and entry.is_file()
            ]
    except OSError as exc:
        raise FilesystemError(f"failed to list `{manifest_dir}`: {exc}", path=manifest_dir) from exc


def locate_license_files(
    manifest_dir: Path,
    license_file: Optional[str] = None,
    prefixes: Iterable[str] = LICENSE_FILE_PREFIXES,
) -> tuple[Path, ...]:
    """Find files next to a manifest that look like license texts.

    Directory entries are matched by case-sensitive filename prefix, so
    ``LICENSE-MIT`` and ``LICENSE.txt`` both count. A declared license file
    is added when it exists. The result is deduplicated and sorted by path.
    """

    found = set(_scan_directory(manifest_dir, prefixes))
    declared = _declared_license_path(manifest_dir, license_file)
    if declared is not None:
        found.add(declared)
    return tuple(sorted(found, key=str))


def locate_package_license_files(package: Package) -> tuple[Path, ...]:
    return locate_license_files(package.manifest_dir, package.license_file)
