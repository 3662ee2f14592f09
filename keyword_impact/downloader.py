"""Fetching the most popular Composer packages from Packagist."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

PACKAGIST_PER_PAGE = 15
MAX_CONCURRENT_DOWNLOADS = 500
USER_AGENT = "keyword-impact-analyzer/1.0.0"
POPULAR_URL = "https://packagist.org/explore/popular.json"
METADATA_URL = "https://repo.packagist.org/p2/{vendor}/{package}.json"


class DownloadError(Exception):
    """A package list, package metadata or zipball could not be obtained."""


async def _get_json(client: httpx.AsyncClient, url: str, fetch_error: str, parse_error: str):
    try:
        response = await client.get(url)
    except httpx.HTTPError as error:
        raise DownloadError(f"{fetch_error}: {error}") from error
    try:
        return response.json()
    except ValueError as error:
        raise DownloadError(parse_error) from error


async def get_top_packages(client: httpx.AsyncClient, min_index: int, max_index: int) -> list[str]:
    """Names of popular packages, counted from the page holding ``min_index``."""
    packages: list[str] = []
    page = min_index // PACKAGIST_PER_PAGE + 1
    collected = 0

    logger.info(
        "Fetching top packages from Packagist (min: %d, max: %d)", min_index, max_index
    )

    while True:
        url = f"{POPULAR_URL}?page={page}"
        logger.debug("Fetching page %d: %s", page, url)
        data = await _get_json(
            client, url, "Failed to fetch package list", "Failed to parse package list JSON"
        )
        try:
            names = [str(item["name"]) for item in data["packages"]]
        except (KeyError, TypeError) as error:
            raise DownloadError("Failed to parse package list JSON") from error

        if not names:
            logger.info("Packagist ran out of packages; collected %d", len(packages))
            return packages

        for name in names:
            if min_index <= collected < max_index:
                packages.append(name)
            collected += 1
            if collected >= max_index:
                logger.info("Collected %d packages", len(packages))
                return packages

        page += 1


def _dist_url(details, package_name: str) -> str:
    try:
        known = details["packages"]
        if not isinstance(known, dict):
            raise TypeError("packages is not a mapping")
    except (KeyError, TypeError) as error:
        raise DownloadError("Failed to parse package metadata") from error

    versions = known.get(package_name)
    if versions is None:
        raise DownloadError("Package not found in metadata")
    if not isinstance(versions, list):
        raise DownloadError("Failed to parse package metadata")
    if not versions:
        raise DownloadError("No versions available for package")

    dist = versions[-1].get("dist") if isinstance(versions[-1], dict) else None
    if dist is None:
        raise DownloadError("No dist information available")
    try:
        return str(dist["url"])
    except (KeyError, TypeError) as error:
        raise DownloadError("Failed to parse package metadata") from error


async def download_package(client: httpx.AsyncClient, package_name: str, target_dir) -> Path:
    """Store the latest listed zipball of ``vendor/package`` under ``target_dir/zipballs``."""
    name = package_name.lower()
    logger.debug("Processing package: %s", package_name)

    parts = name.split("/")
    if len(parts) != 2:
        raise DownloadError(f"Invalid package name format: {package_name}")
    vendor, package = parts

    details = await _get_json(
        client,
        METADATA_URL.format(vendor=vendor, package=package),
        "Failed to fetch package metadata",
        "Failed to parse package metadata",
    )
    url = _dist_url(details, name)
    logger.debug("Selected version for %s", package_name)

    zipball_dir = Path(target_dir) / "zipballs" / name
    try:
        zipball_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise DownloadError(f"Failed to create zipball directory: {error}") from error

    zipball_path = zipball_dir / f"{name.replace('/', '-')}.zip"
    if zipball_path.exists():
        logger.debug("Package %s already downloaded, skipping", package_name)
        return zipball_path

    logger.debug("Downloading %s from %s", package_name, url)
    try:
        response = await client.get(url)
        content = response.content
    except httpx.HTTPError as error:
        raise DownloadError(f"Failed to download package: {error}") from error

    try:
        zipball_path.write_bytes(content)
    except OSError as error:
        raise DownloadError(f"Failed to write zipball: {error}") from error

    logger.debug("Downloaded %d bytes to %s", len(content), zipball_path)
    return zipball_path


async def _download_all(
    client: httpx.AsyncClient, target_dir: Path, min_index: int, max_index: int
) -> tuple[int, int]:
    packages = await get_top_packages(client, min_index, max_index)
    semaphore = asyncio.Semaphore(MAX_CONCURRENT_DOWNLOADS)

    async def attempt(name: str) -> bool:
        async with semaphore:
            try:
                await download_package(client, name, target_dir)
            except (DownloadError, OSError) as error:
                logger.warning("Failed to download %s: %s", name, error)
                return False
        return True

    outcomes = await asyncio.gather(*(attempt(name) for name in packages))
    successful = sum(outcomes)
    return successful, len(outcomes) - successful


async def download_packages(
    target_dir, min_index: int, max_index: int, client: httpx.AsyncClient | None = None
) -> tuple[int, int]:
    """Download packages ``min_index`` to ``max_index``; return (successful, failed)."""
    target_dir = Path(target_dir)
    try:
        (target_dir / "zipballs").mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise DownloadError(f"Failed to create zipballs directory: {error}") from error

    if client is not None:
        return await _download_all(client, target_dir, min_index, max_index)

    async with httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT}, follow_redirects=True, timeout=None
    ) as own_client:
        return await _download_all(own_client, target_dir, min_index, max_index)