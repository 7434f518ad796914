"""
Per-directory pipeline: scan -> validate -> rename -> package.

Each directory is processed on its own. Nothing is shared between runs, and a
failure in one directory never touches archives written for earlier ones.
The pipeline performs no terminal I/O: overwrite decisions and progress
reporting are callbacks supplied by the caller.
"""

import logging
import shutil
from pathlib import Path

from .errors import AlreadyExistsError, DeleteError, Dir2CbzError, NonImageFilesError
from .models import PackOptions, RunResult, RunStatus
from .packager import build_archive_spec, write_archive
from .renamer import rename_manifest
from .scanner import scan_directory
from .validator import validate_manifest

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".cbz"


def archive_path_for(directory, output_dir=None):
    """
    Where the archive for `directory` goes.

    Args:
        directory (Path): Input directory, e.g. "comics/Vol 01"
        output_dir (Path): Optional directory to collect archives in

    Returns:
        Path: "comics/Vol 01.cbz", or "<output_dir>/Vol 01.cbz"
    """
    directory = Path(directory)
    if directory.name in ("", ".."):
        # "." or ".." have no usable name
        directory = directory.resolve()
    # Not with_suffix(): "Vol. 1" must become "Vol. 1.cbz", not "Vol.cbz"
    name = directory.name + ARCHIVE_SUFFIX
    if output_dir is not None:
        return Path(output_dir) / name
    return directory.parent / name


def convert_directory(
    directory, options=None, confirm_overwrite=None, on_progress=None
):
    """
    Package one directory of images into a CBZ.

    Args:
        directory (Path): Directory holding the pages
        options (PackOptions): Pipeline options (defaults if None)
        confirm_overwrite (callable): Asked as confirm_overwrite(path) when the
            archive already exists and options.overwrite is False. Returning
            True replaces the archive, False leaves it alone.
        on_progress (callable): Forwarded to the validator

    Returns:
        RunResult: PACKED, EMPTY or DECLINED

    Raises:
        AlreadyExistsError: Archive exists, overwrite is off and there is no
            confirm_overwrite callback
        Dir2CbzError: Any other pipeline failure, tagged with the directory
    """
    options = options or PackOptions()
    directory = Path(directory)
    target = archive_path_for(directory, options.output_dir)

    try:
        # Ask before doing any work, the answer may make it pointless
        overwrite = options.overwrite
        if not overwrite and target.exists():
            if confirm_overwrite is None:
                raise AlreadyExistsError(target)
            if not confirm_overwrite(target):
                logger.info("Not creating %s", target)
                return RunResult(directory, RunStatus.DECLINED, archive_path=target)
            overwrite = True

        manifest = scan_directory(directory, options.exclude)

        if options.strict and manifest.non_images:
            raise NonImageFilesError([e.path for e in manifest.non_images])

        if not manifest.images:
            logger.warning("No images found in %s, nothing to package", directory)
            return RunResult(directory, RunStatus.EMPTY, manifest=manifest)

        if options.verify:
            validate_manifest(manifest, on_progress)

        if options.rename:
            manifest = rename_manifest(manifest, options.pad_width)

        spec = build_archive_spec(
            manifest, target, overwrite=overwrite, compression=options.compression
        )
        write_archive(spec)

    except Dir2CbzError as e:
        if e.directory is None:
            e.directory = directory
        raise

    logger.info("Created %s with %d images", target, len(spec.members))
    return RunResult(
        directory, RunStatus.PACKED, archive_path=target, manifest=manifest
    )


def process_directories(
    directories,
    options=None,
    confirm_overwrite=None,
    on_progress=None,
    on_start=None,
):
    """
    Run convert_directory() over several directories, in the order given.

    A failing directory yields a FAILED result carrying the error and the
    loop moves on to the next one. Results are yielded as soon as each
    directory is done, so the caller can act on one (e.g. delete its source)
    before the next is started.

    Args:
        on_start (callable): Called with each directory before it is processed

    Yields:
        RunResult: One per input directory
    """
    for directory in directories:
        directory = Path(directory)
        if on_start is not None:
            on_start(directory)
        try:
            yield convert_directory(
                directory, options, confirm_overwrite, on_progress
            )
        except Dir2CbzError as e:
            logger.debug("Processing %s failed: %s", directory, e)
            yield RunResult(directory, RunStatus.FAILED, error=e)


def delete_source(directory, archive_path=None):
    """
    Remove an input directory and everything in it.

    Only called once its archive has been written; a failure here is reported
    on its own and does not affect the archive.

    Args:
        directory (Path): Input directory to remove
        archive_path (Path): The archive written for it. The directory is
            kept if the archive lies inside it.

    Raises:
        DeleteError: The directory could not be removed, or holds the archive
    """
    directory = Path(directory)
    if archive_path is not None and Path(archive_path).resolve().is_relative_to(
        directory.resolve()
    ):
        raise DeleteError(
            f"Not removing directory {directory}: it contains {archive_path}",
            directory,
        )
    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise DeleteError(
            f"Failed to remove directory {directory}: {e.strerror or e}", directory
        ) from e
    logger.info("Deleted %s", directory)
