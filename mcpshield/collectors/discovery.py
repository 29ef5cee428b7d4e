"""
Discovery — Source file, manifest and package.json lookup.

Everything here runs before the scan modules and feeds the immutable
ScanContext. Only an unreadable scan root is fatal.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcpshield.config import settings
from mcpshield.models.context_models import Manifest, PackageMetadata, SourceFile

logger = logging.getLogger("mcpshield.collectors.discovery")


class ScanTargetError(Exception):
    """The scan root is missing or unreadable; no report can be produced."""


def discover_files(
    root: str | Path,
    extensions: list[str] | None = None,
    excluded_dirs: list[str] | None = None,
) -> list[SourceFile]:
    """
    Recursively collect source files under ``root``.

    Args:
        root: Scan root directory.
        extensions: File suffixes to keep (defaults to settings).
        excluded_dirs: Directory names never descended into.

    Returns:
        SourceFile records in a stable, path-sorted order.

    Raises:
        ScanTargetError: If the root itself cannot be listed.
    """
    base = Path(root).resolve()
    if not base.is_dir():
        raise ScanTargetError(f"Scan target is not a directory: {base}")

    wanted = set(extensions or settings.source_extensions)
    skipped = set(excluded_dirs or settings.excluded_dirs)

    try:
        top_entries = sorted(base.iterdir())
    except OSError as e:
        raise ScanTargetError(f"Cannot read scan target {base}: {e}") from e

    files: list[SourceFile] = []
    _walk(base, top_entries, wanted, skipped, files)
    return files


def _walk(
    base: Path,
    entries: list[Path],
    wanted: set[str],
    skipped: set[str],
    files: list[SourceFile],
) -> None:
    for entry in entries:
        if entry.is_dir():
            if entry.name in skipped or entry.is_symlink():
                continue
            try:
                children = sorted(entry.iterdir())
            except OSError as e:
                logger.debug(f"Skipping unreadable directory {entry}: {e}")
                continue
            _walk(base, children, wanted, skipped, files)
        elif entry.is_file() and entry.suffix in wanted:
            files.append(
                SourceFile(
                    path=str(entry),
                    relative=entry.relative_to(base).as_posix(),
                    name=entry.name,
                )
            )


def find_manifest(root: str | Path, candidates: list[str] | None = None) -> Manifest | None:
    """Return the first candidate manifest that parses as a JSON object."""
    base = Path(root)
    for candidate in candidates or settings.manifest_candidates:
        data = _load_json_object(base / candidate)
        if data is not None:
            return Manifest.from_data(candidate, data)
    return None


def find_package_metadata(root: str | Path, package_file: str | None = None) -> PackageMetadata | None:
    data = _load_json_object(Path(root) / (package_file or settings.package_file))
    if data is None:
        return None
    return PackageMetadata.from_data(data)


def read_source(source_file: SourceFile) -> str | None:
    """Full text of a source file, or None when it cannot be read.

    Undecodable bytes become U+FFFD; only I/O failures skip a file.
    """
    try:
        return Path(source_file.path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipping unreadable file {source_file.relative}: {e}")
        return None


def _load_json_object(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unparseable {path.name}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path.name}: top-level value is not an object")
        return None
    return data
