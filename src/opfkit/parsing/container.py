"""Locate and read the package document inside an EPUB container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from zipfile import BadZipFile, ZipFile

from lxml import etree

CONTAINER_XML_PATH = "META-INF/container.xml"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"
EPUB_MIMETYPE = "application/epub+zip"


@dataclass(slots=True)
class ContainerError(Exception):
    """Domain error for unreadable or incomplete EPUB containers."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(frozen=True, slots=True)
class RootFile:
    """One <rootfile> declared by META-INF/container.xml."""

    path: str
    media_type: str | None = None


def parse_container_xml(data: bytes) -> list[RootFile]:
    """Return the rootfiles declared in container.xml, in document order."""

    parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)
    root = etree.fromstring(data, parser=parser)
    rootfiles: list[RootFile] = []
    for node in root.xpath("//*[local-name()='rootfile']"):
        full_path = (node.get("full-path") or "").strip()
        if full_path:
            rootfiles.append(RootFile(path=full_path, media_type=node.get("media-type")))
    return rootfiles


def select_root_file(rootfiles: list[RootFile]) -> RootFile | None:
    """Prefer the first OPF rootfile; otherwise take whatever is listed first."""

    for rootfile in rootfiles:
        if rootfile.media_type == PACKAGE_MEDIA_TYPE:
            return rootfile
    return rootfiles[0] if rootfiles else None


class _Container:
    """Shared rootfile discovery for archive and directory containers."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._check_mimetype()
        self.root_file = self._locate_root_file()

    @property
    def root_file_path(self) -> str:
        return self.root_file.path

    def read(self, name: str) -> bytes:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def read_root_file(self) -> bytes:
        return self.read(self.root_file_path)

    def _check_mimetype(self) -> None:
        if not self.exists("mimetype"):
            return
        declared = self.read("mimetype").decode("ascii", errors="replace").strip()
        if declared != EPUB_MIMETYPE:
            raise ContainerError(self.path, f"Unexpected mimetype {declared!r}")

    def _locate_root_file(self) -> RootFile:
        if not self.exists(CONTAINER_XML_PATH):
            raise ContainerError(self.path, f"Missing {CONTAINER_XML_PATH}")
        try:
            rootfiles = parse_container_xml(self.read(CONTAINER_XML_PATH))
        except etree.XMLSyntaxError as exc:
            raise ContainerError(self.path, f"Malformed {CONTAINER_XML_PATH}: {exc}") from exc

        rootfile = select_root_file(rootfiles)
        if rootfile is None:
            raise ContainerError(self.path, f"{CONTAINER_XML_PATH} declares no rootfile")
        return rootfile


class ZipContainer(_Container):
    """Packaged .epub archive."""

    def __init__(self, path: Path) -> None:
        try:
            with ZipFile(path, "r") as archive:
                self._names = set(archive.namelist())
        except (BadZipFile, OSError) as exc:
            raise ContainerError(path, f"Failed to open EPUB archive: {exc}") from exc
        super().__init__(path)

    def exists(self, name: str) -> bool:
        return name in self._names

    def read(self, name: str) -> bytes:
        if name not in self._names:
            raise ContainerError(self.path, f"Archive has no member {name!r}")
        try:
            with ZipFile(self.path, "r") as archive:
                return archive.read(name)
        except (BadZipFile, OSError) as exc:
            raise ContainerError(self.path, f"Failed to read {name!r}: {exc}") from exc


class DirectoryContainer(_Container):
    """Exploded EPUB laid out on disk."""

    def _resolve(self, name: str) -> Path:
        base = self.path.resolve()
        target = (base / name).resolve()
        if target != base and base not in target.parents:
            raise ContainerError(self.path, f"Member {name!r} escapes the container directory")
        return target

    def exists(self, name: str) -> bool:
        return self._resolve(name).is_file()

    def read(self, name: str) -> bytes:
        try:
            return self._resolve(name).read_bytes()
        except OSError as exc:
            raise ContainerError(self.path, f"Failed to read {name!r}: {exc}") from exc


class PackageFileContainer:
    """A bare package document with no surrounding container."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.root_file = RootFile(path=path.name, media_type=PACKAGE_MEDIA_TYPE)

    @property
    def root_file_path(self) -> str:
        return self.root_file.path

    def read_root_file(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise ContainerError(self.path, f"Failed to read package document: {exc}") from exc


def open_container(path: str | Path) -> _Container | PackageFileContainer:
    """Pick the container flavour for ``path``: directory, bare .opf or archive."""

    source = Path(path)
    if source.is_dir():
        return DirectoryContainer(source)
    if not source.is_file():
        raise ContainerError(source, "No such file or directory")
    if source.suffix.lower() == ".opf":
        return PackageFileContainer(source)
    return ZipContainer(source)
