"""Convenience entrypoint: open a container and parse its package document."""

from __future__ import annotations

from pathlib import Path

from opfkit.config import ParserSettings
from opfkit.models import OPFParseResult
from opfkit.parsing.container import open_container
from opfkit.parsing.document import load_package_document, package_version
from opfkit.parsing.opf import OPFParser


def parse_epub(
    path: str | Path,
    *,
    settings: ParserSettings | None = None,
    version: float | None = None,
) -> OPFParseResult:
    """Parse the package document of an .epub, exploded EPUB directory or .opf file.

    ``version`` overrides the package's own ``version`` attribute. Raises
    ``ContainerError`` or ``PackageDocumentError`` when the package document
    cannot be reached or parsed.
    """

    effective = settings or ParserSettings()
    container = open_container(path)
    document = load_package_document(container.read_root_file(), source=f"{path}!{container.root_file_path}")
    resolved_version = version if version is not None else package_version(document, effective.default_version)
    return OPFParser().parse(document, container, resolved_version)
