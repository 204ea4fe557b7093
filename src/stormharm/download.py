"""Download the raw storm data file.

The report reads ``StormData.csv.bz2`` exactly as published; it is
saved to the raw data folder without decompressing.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from stormharm.errors import MalformedInputError

logger = logging.getLogger(__name__)


def fetch_storm_data(url: str, destination: str, timeout: float = 60.0) -> Path:
    """Stream ``url`` to ``destination`` unless the file already exists.

    Args:
        url: Address of the (compressed) storm data CSV.
        destination: Local file path to write.
        timeout: Seconds to wait for the server per request.

    Returns:
        Path to the local file.

    Raises:
        MalformedInputError: The download failed; no partial file is left.
    """
    target = Path(destination)
    if target.exists():
        logger.info("Storm data already present, skipping download: %s", target)
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")

    logger.info("Downloading storm data from %s", url)
    try:
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
        with open(partial, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise MalformedInputError(f"Cannot download storm data from {url}: {exc}") from exc

    partial.replace(target)
    logger.info(
        "Downloaded %s (%.1f MB)",
        target.name,
        target.stat().st_size / 1024 / 1024,
    )
    return target
