from __future__ import annotations

from pathlib import Path
from zipfile import ZipFile

import pytest

from opfkit.parsing.container import (
    ContainerError,
    DirectoryContainer,
    PackageFileContainer,
    RootFile,
    ZipContainer,
    open_container,
    parse_container_xml,
    select_root_file,
)

_CONTAINER_XML = b"""<?xml version="1.0"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

_OPF = b'<package xmlns="http://www.idpf.org/2007/opf" version="2.0"><metadata/></package>'


def _write_zip(path: Path, members: dict[str, bytes]) -> None:
    with ZipFile(path, "w") as archive:
        for name, payload in members.items():
            archive.writestr(name, payload)


def test_zip_container_locates_and_reads_root_file(tmp_path: Path) -> None:
    book = tmp_path / "book.epub"
    _write_zip(
        book,
        {
            "mimetype": b"application/epub+zip",
            "META-INF/container.xml": _CONTAINER_XML,
            "OEBPS/content.opf": _OPF,
        },
    )

    container = open_container(book)

    assert isinstance(container, ZipContainer)
    assert container.root_file_path == "OEBPS/content.opf"
    assert container.read_root_file() == _OPF


def test_directory_container_reads_exploded_epub(tmp_path: Path) -> None:
    (tmp_path / "META-INF").mkdir()
    (tmp_path / "META-INF" / "container.xml").write_bytes(_CONTAINER_XML)
    (tmp_path / "OEBPS").mkdir()
    (tmp_path / "OEBPS" / "content.opf").write_bytes(_OPF)

    container = open_container(tmp_path)

    assert isinstance(container, DirectoryContainer)
    assert container.read_root_file() == _OPF
    with pytest.raises(ContainerError, match="escapes"):
        container.read("../outside.txt")


def test_bare_opf_file_is_its_own_container(tmp_path: Path) -> None:
    package = tmp_path / "package.opf"
    package.write_bytes(_OPF)

    container = open_container(package)

    assert isinstance(container, PackageFileContainer)
    assert container.root_file_path == "package.opf"
    assert container.read_root_file() == _OPF


def test_missing_container_xml_is_reported(tmp_path: Path) -> None:
    book = tmp_path / "broken.epub"
    _write_zip(book, {"mimetype": b"application/epub+zip"})

    with pytest.raises(ContainerError, match="META-INF/container.xml") as info:
        open_container(book)

    assert str(book) in str(info.value)


def test_wrong_mimetype_is_rejected(tmp_path: Path) -> None:
    book = tmp_path / "odt.epub"
    _write_zip(book, {"mimetype": b"application/vnd.oasis.opendocument.text", "META-INF/container.xml": _CONTAINER_XML})

    with pytest.raises(ContainerError, match="mimetype"):
        open_container(book)


def test_non_zip_and_missing_paths_fail_with_container_error(tmp_path: Path) -> None:
    not_zip = tmp_path / "plain.epub"
    not_zip.write_text("hello", encoding="utf-8")

    with pytest.raises(ContainerError, match="archive"):
        open_container(not_zip)
    with pytest.raises(ContainerError, match="No such file"):
        open_container(tmp_path / "absent.epub")


def test_missing_root_file_member_is_reported(tmp_path: Path) -> None:
    book = tmp_path / "hollow.epub"
    _write_zip(book, {"META-INF/container.xml": _CONTAINER_XML})

    container = open_container(book)

    with pytest.raises(ContainerError, match="OEBPS/content.opf"):
        container.read_root_file()


def test_root_file_selection_prefers_package_media_type() -> None:
    rootfiles = parse_container_xml(
        b"""<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container"><rootfiles>
        <rootfile full-path="alt/book.pdf" media-type="application/pdf"/>
        <rootfile full-path="main/book.opf" media-type="application/oebps-package+xml"/>
        <rootfile media-type="application/oebps-package+xml"/>
        </rootfiles></container>"""
    )

    assert [rootfile.path for rootfile in rootfiles] == ["alt/book.pdf", "main/book.opf"]
    assert select_root_file(rootfiles) == RootFile("main/book.opf", "application/oebps-package+xml")
    assert select_root_file([RootFile("only.opf")]) == RootFile("only.opf")
    assert select_root_file([]) is None


def test_container_without_rootfile_is_rejected(tmp_path: Path) -> None:
    book = tmp_path / "empty.epub"
    _write_zip(
        book,
        {"META-INF/container.xml": b'<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container"/>'},
    )

    with pytest.raises(ContainerError, match="no rootfile"):
        open_container(book)
