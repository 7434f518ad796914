"""
Image validator.

Fully decodes every image in a manifest so a corrupt page is caught before
anything is written. A comic with a missing page is worse than no comic, so
the first failure aborts the directory.
"""

import logging

from PIL import Image

from .errors import CorruptImageError

logger = logging.getLogger(__name__)


def verify_image(path):
    """
    Decode an image completely.

    Args:
        path (Path): Image file to decode

    Raises:
        CorruptImageError: The image could not be decoded
    """
    try:
        with Image.open(path) as img:
            # load() decodes every pixel; verify() would only check the container
            img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise CorruptImageError(path, str(e)) from e


def validate_manifest(manifest, on_progress=None):
    """
    Verify every image in a manifest, in ordinal order.

    Args:
        manifest (Manifest): Output of the scanner
        on_progress (callable): Called as on_progress(entry, done, total)
            after each image passed, used by the CLI to drive its progress bar

    Returns:
        Manifest: The same manifest, unchanged

    Raises:
        CorruptImageError: On the first image that fails to decode
    """
    images = manifest.images
    for done, entry in enumerate(images, 1):
        try:
            verify_image(entry.path)
        except CorruptImageError as e:
            e.directory = manifest.directory
            logger.debug("Verification failed for %s: %s", entry.path, e.reason)
            raise

        logger.debug("Verified %s", entry.name)
        if on_progress is not None:
            on_progress(entry, done, len(images))

    return manifest
