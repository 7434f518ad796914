"""
dir2cbz - pack directories of images into CBZ comic archives.

Public API:
    - scan_directory: Classify and order a directory's entries
    - validate_manifest: Decode every image, fail on the first corrupt one
    - rename_manifest: Assign sequential page names
    - build_archive_spec / write_archive: Write the CBZ atomically
    - convert_directory / process_directories: The whole pipeline
"""

__version__ = "1.0.0"

from .errors import (
    AlreadyExistsError,
    ArchiveWriteError,
    CorruptImageError,
    DeleteError,
    Dir2CbzError,
    NonImageFilesError,
    ScanError,
)
from .models import (
    ArchiveSpec,
    Classification,
    Manifest,
    ManifestEntry,
    PackOptions,
    RunResult,
    RunStatus,
)
from .packager import build_archive_spec, write_archive
from .pipeline import (
    archive_path_for,
    convert_directory,
    delete_source,
    process_directories,
)
from .renamer import rename_manifest
from .scanner import natural_key, scan_directory
from .validator import validate_manifest

__all__ = [
    "AlreadyExistsError",
    "ArchiveSpec",
    "ArchiveWriteError",
    "Classification",
    "CorruptImageError",
    "DeleteError",
    "Dir2CbzError",
    "Manifest",
    "ManifestEntry",
    "NonImageFilesError",
    "PackOptions",
    "RunResult",
    "RunStatus",
    "ScanError",
    "archive_path_for",
    "build_archive_spec",
    "convert_directory",
    "delete_source",
    "natural_key",
    "process_directories",
    "rename_manifest",
    "scan_directory",
    "validate_manifest",
    "write_archive",
]
