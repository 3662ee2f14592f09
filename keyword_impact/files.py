"""Locating PHP sources and reading them together with their vendor."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from keyword_impact.results import Vendor

PHP_EXTENSIONS = frozenset({"php", "php7", "php8"})


@dataclass(frozen=True)
class SourceFile:
    """A PHP file's text and the vendor of the package it belongs to."""

    path: Path
    vendor: Vendor
    contents: str


def _vendor_for(path: Path, sources_root: Path) -> Vendor:
    try:
        parts = path.relative_to(sources_root).parts
    except ValueError:
        return Vendor.OTHER
    if len(parts) < 2:
        return Vendor.OTHER
    return Vendor.from_package(f"{parts[0]}/{parts[1]}")


def read_file(path, sources_root) -> SourceFile | None:
    """Read a file, decoding invalid UTF-8 lossily; None if it cannot be read."""
    path, sources_root = Path(path), Path(sources_root)
    try:
        data = path.read_bytes()
    except OSError:
        return None
    contents = data.decode("utf-8", errors="replace")
    return SourceFile(path, _vendor_for(path, sources_root), contents)


def has_php_extension(path) -> bool:
    suffix = Path(path).suffix
    return suffix.startswith(".") and suffix[1:] in PHP_EXTENSIONS


def walk_files(base_path) -> Iterator[Path]:
    """Yield every regular PHP file below ``base_path``; symlinks are skipped."""
    with os.scandir(base_path) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                yield from walk_files(entry.path)
            elif entry.is_file(follow_symlinks=False) and has_php_extension(entry.name):
                yield Path(entry.path)