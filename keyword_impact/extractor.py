"""Unpacking downloaded package zipballs into the sources tree."""

from __future__ import annotations

import logging
import shutil
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

logger = logging.getLogger(__name__)


def extract_zip(zip_path, extract_to) -> None:
    """Extract an archive, lifting a single top-level directory into place."""
    zip_path, extract_to = Path(zip_path), Path(extract_to)
    with zipfile.ZipFile(zip_path) as archive:
        temp_dir = extract_to.with_suffix(".tmp")
        temp_dir.mkdir(parents=True, exist_ok=True)
        archive.extractall(temp_dir)

    entries = list(temp_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        entries[0].rename(extract_to)
        temp_dir.rmdir()
    else:
        temp_dir.rename(extract_to)


def collect_zip_files(directory) -> list[Path]:
    """All ``.zip`` files below ``directory``; empty if it does not exist."""
    directory = Path(directory)
    if not directory.exists():
        return []
    found: list[Path] = []
    for path in directory.iterdir():
        if path.is_dir():
            found.extend(collect_zip_files(path))
        elif path.suffix == ".zip":
            found.append(path)
    return found


def _extract_one(zip_path: Path, zipballs_dir: Path, sources_dir: Path) -> bool:
    package_name = zip_path.relative_to(zipballs_dir).parent.as_posix()
    extract_dir = sources_dir / package_name
    if extract_dir.exists():
        logger.debug("Package %s already extracted, skipping", package_name)
        return True
    try:
        extract_zip(zip_path, extract_dir)
    except (OSError, zipfile.BadZipFile, shutil.Error) as error:
        logger.warning(
            "Failed to extract package %s from %s: %s", package_name, zip_path, error
        )
        return False
    return True


def extract_packages(target_dir) -> int:
    """Extract every zipball under ``target_dir/zipballs``; return the success count."""
    target_dir = Path(target_dir)
    zipballs_dir = target_dir / "zipballs"
    sources_dir = target_dir / "sources"
    sources_dir.mkdir(parents=True, exist_ok=True)

    zip_files = collect_zip_files(zipballs_dir)
    logger.info("Extracting %d packages...", len(zip_files))

    with ThreadPoolExecutor() as pool:
        outcomes = list(
            pool.map(lambda path: _extract_one(path, zipballs_dir, sources_dir), zip_files)
        )

    successful = sum(outcomes)
    failed = len(outcomes) - successful
    if failed:
        logger.warning(
            "Extraction complete: %d successful, %d failed", successful, failed
        )
    return successful