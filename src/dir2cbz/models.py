"""
Data model shared by the pipeline stages.

Scanner -> Validator -> Renamer -> Packager pass these values along; nothing
here is shared between directories.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional
from zipfile import ZIP_DEFLATED, ZIP_STORED


# Names excluded from every archive unless the caller overrides them.
# Hidden files (.DS_Store, ._foo.jpg, ...) and comic metadata written by taggers.
DEFAULT_EXCLUDE_PATTERNS = (".*", "ComicInfo.xml")


class Classification(Enum):
    """How the scanner classified a directory entry."""

    IMAGE = "image"
    NON_IMAGE = "non-image"
    EXCLUDED = "excluded"


class RunStatus(Enum):
    """Outcome of processing one input directory."""

    PACKED = "packed"  # Archive written
    EMPTY = "empty"  # No images found, nothing written
    DECLINED = "declined"  # Archive exists and the caller chose not to overwrite
    FAILED = "failed"  # Pipeline aborted, see RunResult.error


@dataclass(frozen=True)
class ManifestEntry:
    """
    One classified directory entry.

    Attributes:
        path: Original path of the entry
        classification: Image, non-image or excluded
        ordinal: Position in the scanner's sort order (0-based)
        image_format: Pillow format name ("JPEG", "PNG", ...) for images
        target_name: New in-archive name assigned by the renamer, if any
    """

    path: Path
    classification: Classification
    ordinal: int
    image_format: Optional[str] = None
    target_name: Optional[str] = None

    @property
    def name(self):
        return self.path.name

    @property
    def archive_name(self):
        """Name the entry gets inside the archive."""
        return self.target_name or self.path.name

    def renamed(self, target_name):
        return replace(self, target_name=target_name)


@dataclass(frozen=True)
class Manifest:
    """Ordered classification of one directory's entries."""

    directory: Path
    entries: tuple = ()

    def _of(self, classification):
        return [e for e in self.entries if e.classification is classification]

    @property
    def images(self):
        return self._of(Classification.IMAGE)

    @property
    def non_images(self):
        return self._of(Classification.NON_IMAGE)

    @property
    def excluded(self):
        return self._of(Classification.EXCLUDED)


@dataclass(frozen=True)
class ArchiveSpec:
    """
    Everything the packager needs to write one archive.

    Attributes:
        target: Final path of the .cbz file
        members: Ordered (source path, in-archive name) pairs
        overwrite: Replace the target if it already exists
        compression: zipfile compression constant (stored by default)
    """

    target: Path
    members: tuple = ()
    overwrite: bool = False
    compression: int = ZIP_STORED


@dataclass(frozen=True)
class PackOptions:
    """
    Options consumed by the pipeline, mapped one-to-one from the CLI flags.

    Attributes:
        rename: Give images sequential numeric names
        verify: Fully decode every image before packaging
        overwrite: Replace existing archives without asking
        compress: Deflate entries instead of storing them
        pad_width: None for no padding, 0 for automatic, N for a fixed width
        strict: Refuse to package a directory containing non-images
        exclude: fnmatch patterns of names to leave out
        output_dir: Where to write archives (None = next to the input directory)
    """

    rename: bool = True
    verify: bool = False
    overwrite: bool = False
    compress: bool = False
    pad_width: Optional[int] = None
    strict: bool = False
    exclude: tuple = DEFAULT_EXCLUDE_PATTERNS
    output_dir: Optional[Path] = None

    @property
    def compression(self):
        return ZIP_DEFLATED if self.compress else ZIP_STORED


@dataclass
class RunResult:
    """What happened to one input directory."""

    directory: Path
    status: RunStatus
    archive_path: Optional[Path] = None
    manifest: Optional[Manifest] = None
    error: Optional[Exception] = None

    @property
    def ok(self):
        return self.status is not RunStatus.FAILED

    @property
    def skipped(self):
        """Entries that were reported but left out of the archive."""
        if self.manifest is None:
            return []
        return self.manifest.non_images + self.manifest.excluded
