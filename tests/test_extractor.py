import zipfile

import pytest

from keyword_impact.extractor import collect_zip_files, extract_packages, extract_zip


def _make_zip(path, members):
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)


def test_extract_zip_lifts_single_directory(tmp_path):
    archive = tmp_path / "pkg.zip"
    _make_zip(archive, {"pkg-abc/src/A.php": "<?php", "pkg-abc/README": "hi"})
    target = tmp_path / "out" / "pkg"
    extract_zip(archive, target)
    assert (target / "src" / "A.php").read_text() == "<?php"
    assert (target / "README").read_text() == "hi"
    assert not (tmp_path / "out" / "pkg.tmp").exists()


def test_extract_zip_keeps_multiple_entries(tmp_path):
    archive = tmp_path / "pkg.zip"
    _make_zip(archive, {"a.php": "1", "lib/b.php": "2"})
    target = tmp_path / "out" / "pkg"
    extract_zip(archive, target)
    assert (target / "a.php").read_text() == "1"
    assert (target / "lib" / "b.php").read_text() == "2"


def test_extract_zip_bad_archive(tmp_path):
    bogus = tmp_path / "bad.zip"
    bogus.write_bytes(b"not a zip")
    with pytest.raises(zipfile.BadZipFile):
        extract_zip(bogus, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_collect_zip_files(tmp_path):
    _make_zip(tmp_path / "a" / "one.zip", {"x": "1"})
    _make_zip(tmp_path / "b" / "c" / "two.zip", {"x": "1"})
    (tmp_path / "a" / "other.txt").write_text("")
    assert set(collect_zip_files(tmp_path)) == {
        tmp_path / "a" / "one.zip",
        tmp_path / "b" / "c" / "two.zip",
    }


def test_collect_zip_files_missing_directory(tmp_path):
    assert collect_zip_files(tmp_path / "missing") == []


def test_extract_packages_counts_and_skips(tmp_path):
    zipballs = tmp_path / "zipballs"
    _make_zip(
        zipballs / "symfony" / "console" / "symfony-console.zip",
        {"console-1/Command.php": "<?php"},
    )
    _make_zip(
        zipballs / "acme" / "lib" / "acme-lib.zip",
        {"lib-1/Lib.php": "<?php"},
    )
    bad = zipballs / "broken" / "pkg" / "broken-pkg.zip"
    bad.parent.mkdir(parents=True)
    bad.write_bytes(b"garbage")

    assert extract_packages(tmp_path) == 2
    sources = tmp_path / "sources"
    assert (sources / "symfony" / "console" / "Command.php").exists()
    assert (sources / "acme" / "lib" / "Lib.php").exists()
    assert not (sources / "broken" / "pkg").exists()

    # Already extracted packages count as successes on a second run.
    assert extract_packages(tmp_path) == 2


def test_extract_packages_without_zipballs(tmp_path):
    assert extract_packages(tmp_path) == 0
    assert (tmp_path / "sources").is_dir()