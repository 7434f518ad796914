"""
Sequential renamer.

Assigns the pages of a manifest the names 1.ext, 2.ext, ... in ordinal order.
Only names are computed; files on disk are never touched.
"""

import logging

from .models import Manifest

logger = logging.getLogger(__name__)

# Extension used when a page has no suffix of its own.
FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "WEBP": "webp",
}


def pad_width_for(count, pad_width=None):
    """
    Resolve the zero-padding width for a run of `count` pages.

    Args:
        count (int): Number of pages
        pad_width (int): None for no padding, 0 for automatic
            (at least two digits, more for 100+ pages), N for exactly N

    Returns:
        int: Minimum number of digits in a page number
    """
    if pad_width is None:
        return 1
    if pad_width == 0:
        return max(len(str(count)), 2)
    return pad_width


def extension_for(entry):
    suffix = entry.path.suffix
    if suffix:
        return suffix[1:]
    return FORMAT_EXTENSIONS.get(entry.image_format, "")


def sequential_names(entries, pad_width=None):
    """
    Build the new names for a list of image entries.

    Args:
        entries (list): Image entries in ordinal order
        pad_width (int): See pad_width_for()

    Returns:
        list: New names, one per entry, in the same order
    """
    width = pad_width_for(len(entries), pad_width)
    names = []
    for number, entry in enumerate(entries, 1):
        ext = extension_for(entry)
        stem = f"{number:0{width}d}"
        names.append(f"{stem}.{ext}" if ext else stem)
    return names


def rename_manifest(manifest, pad_width=None):
    """
    Return a copy of the manifest with a target name on every image.

    Non-image and excluded entries are carried over untouched; they are
    never renamed and never packaged.
    """
    images = manifest.images
    new_names = dict(
        zip((e.ordinal for e in images), sequential_names(images, pad_width))
    )

    entries = []
    for entry in manifest.entries:
        if entry.ordinal in new_names:
            logger.debug("%s -> %s", entry.name, new_names[entry.ordinal])
            entry = entry.renamed(new_names[entry.ordinal])
        entries.append(entry)

    return Manifest(directory=manifest.directory, entries=tuple(entries))
