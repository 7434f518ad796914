"""
CBZ packager.

Writes an ArchiveSpec to disk as a zip file. The archive is built in a
temporary file next to the target and moved into place only once complete,
so a failed run never leaves a half-written .cbz behind or damages an
existing one.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from zipfile import ZIP_STORED, ZipFile

from .errors import AlreadyExistsError, ArchiveWriteError
from .models import ArchiveSpec

logger = logging.getLogger(__name__)


def archive_mode(target):
    """
    Permission bits for the archive being written.

    A replaced archive keeps its mode, a new one gets 0666 minus the umask
    like any other file the user creates.
    """
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    # umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def build_archive_spec(manifest, target, overwrite=False, compression=ZIP_STORED):
    """
    Turn a (possibly renamed) manifest into an ArchiveSpec.

    Only images are included, in ordinal order, under their target name if
    the renamer assigned one and their original name otherwise.
    """
    return ArchiveSpec(
        target=Path(target),
        members=tuple((e.path, e.archive_name) for e in manifest.images),
        overwrite=overwrite,
        compression=compression,
    )


def write_archive(spec):
    """
    Write the archive described by `spec`.

    Args:
        spec (ArchiveSpec): Target, members and overwrite policy

    Returns:
        Path: Path of the written archive

    Raises:
        AlreadyExistsError: Target exists and spec.overwrite is False. The
            existing file is not touched.
        ArchiveWriteError: Anything went wrong while writing. The temporary
            file is removed and any existing archive is left as it was.
    """
    target = spec.target
    if target.exists() and not spec.overwrite:
        raise AlreadyExistsError(target)

    temp_path = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the same directory so the final rename stays on one filesystem
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{target.stem}.", suffix=".tmp", dir=target.parent
        )
        temp_path = Path(temp_name)

        with os.fdopen(fd, "wb") as f:
            # strict_timestamps=False clamps pre-1980 mtimes instead of failing
            with ZipFile(
                f, "w", spec.compression, strict_timestamps=False
            ) as zip_write:
                # Member order is the reading order
                for source, arcname in spec.members:
                    logger.debug("Adding %s as %s", source, arcname)
                    zip_write.write(source, arcname)
            f.flush()
            os.fsync(f.fileno())

        # mkstemp creates the file as 0600
        os.chmod(temp_path, archive_mode(target))
        os.replace(temp_path, target)
        temp_path = None

    # ValueError: a member name zipfile cannot encode (e.g. undecodable bytes)
    except (OSError, ValueError) as e:
        reason = getattr(e, "strerror", None) or e
        raise ArchiveWriteError(f"Failed to write {target}: {reason}", target) from e

    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)

    logger.debug("Wrote %s (%d entries)", target, len(spec.members))
    return target
