"""
Directory scanner.

Lists a directory (non-recursively), classifies every entry as image,
non-image or excluded, and returns them as an ordered Manifest.
"""

import logging
import re
from fnmatch import fnmatchcase
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import ScanError
from .models import DEFAULT_EXCLUDE_PATTERNS, Classification, Manifest, ManifestEntry

logger = logging.getLogger(__name__)

# Formats that can go into a CBZ. Detected from file content, not the name.
SUPPORTED_FORMATS = ("JPEG", "PNG", "GIF", "WEBP")

_DIGITS = re.compile(r"(\d+)")


def natural_key(name):
    """
    Sort key that orders names the way a reader expects.

    The name is split into text and digit runs. Digit runs compare by value
    (so "2.jpg" < "10.jpg"), text runs compare case-insensitively, and at the
    same position text sorts before digits. The raw name breaks ties so the
    order is total and does not depend on the locale.

    Args:
        name (str): File name to build the key for

    Returns:
        tuple: Comparable key

    Example:
        >>> sorted(["b.png", "10.png", "a.png"], key=natural_key)
        ['a.png', 'b.png', '10.png']
    """
    parts = []
    for chunk in _DIGITS.split(name):
        if not chunk:
            continue
        if chunk.isdecimal():
            parts.append((1, int(chunk), ""))
        else:
            parts.append((0, 0, chunk.casefold()))
    return tuple(parts), name


def is_excluded(name, patterns):
    return any(fnmatchcase(name, pattern) for pattern in patterns)


def sniff_format(path):
    """
    Identify a supported image format from the file's content.

    Args:
        path (Path): File to inspect

    Returns:
        str: Pillow format name, or None if the file is not a supported image

    Raises:
        OSError: The file could not be opened for reading
    """
    try:
        # Only the header is read here, decoding happens in the validator
        with Image.open(path, formats=SUPPORTED_FORMATS) as img:
            return img.format
    except UnidentifiedImageError:
        return None


def classify(path, exclude=DEFAULT_EXCLUDE_PATTERNS):
    """
    Classify a single directory entry.

    Returns:
        tuple: (Classification, image format or None)
    """
    if is_excluded(path.name, exclude):
        return Classification.EXCLUDED, None
    if not path.is_file():
        return Classification.NON_IMAGE, None

    image_format = sniff_format(path)
    if image_format is None:
        return Classification.NON_IMAGE, None
    return Classification.IMAGE, image_format


def list_entries(directory):
    """Return the directory's entries in natural order."""
    try:
        paths = list(directory.iterdir())
    except OSError as e:
        raise ScanError(
            f"Failed to read directory {directory}: {e.strerror or e}",
            directory,
            directory,
        ) from e
    return sorted(paths, key=lambda p: natural_key(p.name))


def scan_directory(directory, exclude=DEFAULT_EXCLUDE_PATTERNS):
    """
    Scan a directory and build its manifest.

    Args:
        directory (Path): Directory holding the pages
        exclude (tuple): fnmatch patterns of names to exclude

    Returns:
        Manifest: Every entry, in natural order, with its classification

    Raises:
        ScanError: The directory could not be listed or an entry could not
            be opened for reading
    """
    directory = Path(directory)
    entries = []

    for ordinal, path in enumerate(list_entries(directory)):
        try:
            classification, image_format = classify(path, exclude)
        except OSError as e:
            raise ScanError(
                f"Failed to open {path} for reading: {e.strerror or e}",
                path,
                directory,
            ) from e

        logger.debug("%s: %s", path.name, classification.value)
        entries.append(
            ManifestEntry(
                path=path,
                classification=classification,
                ordinal=ordinal,
                image_format=image_format,
            )
        )

    manifest = Manifest(directory=directory, entries=tuple(entries))
    logger.debug(
        "Scanned %s: %d images, %d non-images, %d excluded",
        directory,
        len(manifest.images),
        len(manifest.non_images),
        len(manifest.excluded),
    )
    return manifest
