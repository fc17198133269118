# tests/test_archive.py

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from syskit.errors import ArchiveError
from syskit.files.archive import archive_and_clean, unzip, zip_path


def _make_site(root: Path) -> Path:
    (root / "assets" / "img").mkdir(parents=True)
    (root / "index.html").write_text("<h1>hi</h1>", "utf-8")
    (root / "assets" / "app.js").write_text("console.log(1)", "utf-8")
    (root / "assets" / "img" / "logo.svg").write_text("<svg/>", "utf-8")
    (root / "debug.log").write_text("noise", "utf-8")
    return root


def test_zip_then_unzip_restores_tree(tmp_path: Path) -> None:
    src = _make_site(tmp_path / "site")
    archive = tmp_path / "backups" / "site.zip"

    assert zip_path(src, archive) is True
    with zipfile.ZipFile(archive) as z:
        assert sorted(z.namelist()) == [
            "assets/app.js",
            "assets/img/logo.svg",
            "debug.log",
            "index.html",
        ]

    out = tmp_path / "restored"
    assert unzip(archive, out) is True
    assert (out / "assets" / "img" / "logo.svg").read_text("utf-8") == "<svg/>"
    assert (out / "index.html").read_text("utf-8") == "<h1>hi</h1>"


def test_zip_excludes_patterns(tmp_path: Path) -> None:
    src = _make_site(tmp_path / "site")
    archive = tmp_path / "site.zip"

    zip_path(src, archive, exclude=["*.log", "img"])

    with zipfile.ZipFile(archive) as z:
        assert sorted(z.namelist()) == ["assets/app.js", "index.html"]


def test_zip_skips_dangling_links(tmp_path: Path) -> None:
    src = _make_site(tmp_path / "site")
    (src / "stale.txt").symlink_to(src / "removed.txt")
    archive = tmp_path / "site.zip"

    zip_path(src, archive)

    with zipfile.ZipFile(archive) as z:
        assert "stale.txt" not in z.namelist()
        assert "index.html" in z.namelist()


def test_zip_single_file_uses_basename(tmp_path: Path) -> None:
    f = tmp_path / "data" / "report.csv"
    f.parent.mkdir()
    f.write_text("a,b\n1,2\n", "utf-8")
    archive = tmp_path / "report.zip"

    zip_path(f, archive)

    with zipfile.ZipFile(archive) as z:
        assert z.namelist() == ["report.csv"]


def test_zip_overwrites_existing_archive(tmp_path: Path) -> None:
    src = _make_site(tmp_path / "site")
    archive = tmp_path / "site.zip"
    archive.write_bytes(b"old garbage")

    zip_path(src, archive)

    assert zipfile.is_zipfile(archive)


def test_zip_invalid_source(tmp_path: Path) -> None:
    with pytest.raises(ArchiveError):
        zip_path(tmp_path / "missing", tmp_path / "x.zip")


def test_unzip_missing_or_corrupt(tmp_path: Path) -> None:
    with pytest.raises(ArchiveError):
        unzip(tmp_path / "missing.zip", tmp_path / "out")

    bad = tmp_path / "bad.zip"
    bad.write_bytes(b"definitely not a zip")
    with pytest.raises(ArchiveError):
        unzip(bad, tmp_path / "out")


def test_unzip_rejects_path_traversal(tmp_path: Path) -> None:
    evil = tmp_path / "evil.zip"
    with zipfile.ZipFile(evil, "w") as z:
        z.writestr("../escape.txt", "gotcha")

    with pytest.raises(ArchiveError, match="Unsafe path"):
        unzip(evil, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


def test_archive_and_clean(tmp_path: Path) -> None:
    src = _make_site(tmp_path / "site")
    archive = tmp_path / "site.zip"

    assert archive_and_clean(src, archive) is True
    assert not src.exists()
    assert zipfile.is_zipfile(archive)
