"""Tests for the command line interface."""

from pathlib import Path
from zipfile import ZipFile

import pytest

from dir2cbz import cli
from dir2cbz.models import DEFAULT_EXCLUDE_PATTERNS

from conftest import make_corrupt_png


def names_in(archive):
    with ZipFile(archive) as zf:
        return zf.namelist()


def cbz_for(directory):
    return directory.parent / f"{directory.name}.cbz"


class TestArguments:
    """Tests for flag parsing."""

    def test_defaults(self):
        """Defaults rename, don't verify and don't overwrite."""
        args = cli.build_parser().parse_args(["pages"])
        options = cli.options_from_args(args)
        assert args.dirs == [Path("pages")]
        assert options.rename is True
        assert options.verify is False
        assert options.overwrite is False
        assert options.pad_width is None
        assert options.exclude == DEFAULT_EXCLUDE_PATTERNS

    def test_short_flags(self):
        """-n, -d and -v map to no-rename, delete and verify."""
        args = cli.build_parser().parse_args(["-n", "-d", "-v", "a", "b"])
        options = cli.options_from_args(args)
        assert args.delete is True
        assert options.rename is False
        assert options.verify is True
        assert args.dirs == [Path("a"), Path("b")]

    def test_pad(self):
        """--pad alone means automatic, --pad N is fixed."""
        parser = cli.build_parser()
        assert cli.options_from_args(parser.parse_args(["x", "--pad"])).pad_width == 0
        assert (
            cli.options_from_args(parser.parse_args(["x", "--pad", "3"])).pad_width
            == 3
        )

    def test_exclude_extends_defaults(self):
        """User patterns are added to the built-in ones."""
        args = cli.build_parser().parse_args(["x", "-x", "*.txt", "-x", "credits*"])
        options = cli.options_from_args(args)
        assert options.exclude == DEFAULT_EXCLUDE_PATTERNS + ("*.txt", "credits*")

    def test_requires_directory(self):
        """At least one directory is required."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestMain:
    """Tests for whole CLI runs."""

    def test_creates_archive(self, comic_dir):
        """A plain run packs and renames."""
        assert cli.main([str(comic_dir)]) == 0
        assert names_in(cbz_for(comic_dir)) == ["1.png", "2.png", "3.png"]
        assert comic_dir.exists()

    def test_no_rename(self, comic_dir):
        """--no-rename keeps the original names."""
        assert cli.main(["--no-rename", str(comic_dir)]) == 0
        assert names_in(cbz_for(comic_dir)) == ["a.png", "b.png", "10.png"]

    def test_delete(self, comic_dir):
        """--delete removes the directory once the archive exists."""
        assert cli.main(["--delete", str(comic_dir)]) == 0
        assert not comic_dir.exists()
        assert names_in(cbz_for(comic_dir)) == ["1.png", "2.png", "3.png"]

    def test_delete_keeps_archive_inside_source(self, comic_dir):
        """--delete never removes a directory the archive was written into."""
        archive = comic_dir / f"{comic_dir.name}.cbz"
        assert cli.main([str(comic_dir), "-o", str(comic_dir), "--delete"]) == 1
        assert comic_dir.is_dir()
        assert names_in(archive) == ["1.png", "2.png", "3.png"]

    def test_delete_skipped_on_failure(self, tmp_path):
        """A directory that failed is never deleted."""
        chapter = tmp_path / "bad"
        chapter.mkdir()
        make_corrupt_png(chapter / "1.png")
        assert cli.main(["--verify", "--delete", str(chapter)]) == 1
        assert chapter.exists()
        assert not cbz_for(chapter).exists()

    def test_verify(self, comic_dir):
        """--verify packs good directories."""
        assert cli.main(["--verify", str(comic_dir)]) == 0
        assert cbz_for(comic_dir).exists()

    def test_failure_continues(self, comic_dir, tmp_path, capsys):
        """A missing directory fails but the others are still packed."""
        assert cli.main([str(tmp_path / "missing"), str(comic_dir)]) == 1
        assert cbz_for(comic_dir).exists()
        assert "ERROR:" in capsys.readouterr().out

    def test_overwrite_declined(self, comic_dir, monkeypatch, capsys):
        """Answering no leaves the existing archive alone."""
        monkeypatch.setattr(cli.Confirm, "ask", lambda *args, **kwargs: False)
        target = cbz_for(comic_dir)
        target.write_bytes(b"keep me")

        assert cli.main([str(comic_dir)]) == 0
        assert target.read_bytes() == b"keep me"
        assert "Not creating cbz" in capsys.readouterr().out

    def test_overwrite_confirmed(self, comic_dir, monkeypatch):
        """Answering yes replaces it."""
        monkeypatch.setattr(cli.Confirm, "ask", lambda *args, **kwargs: True)
        target = cbz_for(comic_dir)
        target.write_bytes(b"replace me")

        assert cli.main([str(comic_dir)]) == 0
        assert names_in(target) == ["1.png", "2.png", "3.png"]

    def test_overwrite_flag(self, comic_dir, monkeypatch):
        """--overwrite never prompts."""

        def fail(*args, **kwargs):
            raise AssertionError("should not prompt")

        monkeypatch.setattr(cli.Confirm, "ask", fail)
        cbz_for(comic_dir).write_bytes(b"replace me")
        assert cli.main(["--overwrite", str(comic_dir)]) == 0
        assert names_in(cbz_for(comic_dir)) == ["1.png", "2.png", "3.png"]

    def test_reports_left_out_files(self, messy_dir, capsys):
        """Non-images are listed but the archive is still created."""
        assert cli.main([str(messy_dir)]) == 0
        assert "Left out 2" in capsys.readouterr().out
        assert names_in(cbz_for(messy_dir)) == ["1.jpg", "2.jpg"]

    def test_strict(self, messy_dir):
        """--strict refuses directories with non-images."""
        assert cli.main(["--strict", str(messy_dir)]) == 1
        assert not cbz_for(messy_dir).exists()

    def test_empty_is_not_failure(self, tmp_path, capsys):
        """A directory without images is skipped, not failed."""
        chapter = tmp_path / "empty"
        chapter.mkdir()
        assert cli.main(["--delete", str(chapter)]) == 0
        assert chapter.exists()
        assert "No images found" in capsys.readouterr().out

    def test_output_dir_and_pad(self, comic_dir, tmp_path):
        """Options reach the pipeline."""
        out = tmp_path / "archives"
        assert cli.main([str(comic_dir), "-o", str(out), "--pad"]) == 0
        assert names_in(out / "Chapter 1.cbz") == ["01.png", "02.png", "03.png"]

    def test_verbose_summary(self, comic_dir, capsys):
        """--verbose prints the configuration and a summary."""
        assert cli.main(["--verbose", str(comic_dir)]) == 0
        out = capsys.readouterr().out
        assert "Configuration" in out
        assert "Summary" in out


def test_version(capsys):
    """--version prints the package version."""
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])
    assert exc_info.value.code == 0
    assert cli.__version__ in capsys.readouterr().out
