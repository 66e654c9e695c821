"""Pipeline entrypoint turning a parsed package tree into a Publication."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from lxml import etree

from opfkit.models import Diagnostic, OPFParseResult, Publication, PublicationSource
from opfkit.parsing.document import child
from opfkit.parsing.manifest import extract_resources, find_cover_id
from opfkit.parsing.metadata import extract_metadata
from opfkit.parsing.spine import resolve_spine

logger = logging.getLogger(__name__)


@runtime_checkable
class ContainerDescriptor(Protocol):
    """Anything that knows where the package document lives in its container."""

    @property
    def root_file_path(self) -> str:
        """Container-relative path of the package document."""


class OPFParser:
    """Run metadata, manifest and spine extraction over one package document.

    Absent elements and dangling references become diagnostics on the result;
    only a tree that cannot be traversed at all fails, and that happens in
    ``load_package_document`` before this parser runs.
    """

    def parse(
        self,
        document: etree._Element,
        container: ContainerDescriptor,
        version: float,
    ) -> OPFParseResult:
        diagnostics: list[Diagnostic] = []

        metadata, found = extract_metadata(document, version)
        diagnostics.extend(found)

        # Resources must exist before the spine can be joined against them.
        entries, cover_links, found = extract_resources(child(document, "manifest"), find_cover_id(document))
        diagnostics.extend(found)

        spine, resources, found = resolve_spine(child(document, "spine"), entries)
        diagnostics.extend(found)

        publication = Publication(
            version=version,
            source=PublicationSource(root_file_path=container.root_file_path),
            metadata=metadata,
            links=tuple(cover_links),
            resources=tuple(resources),
            spine=tuple(spine),
        )
        logger.debug(
            "Parsed %s (version %s): %d spine items, %d other resources, %d diagnostics",
            container.root_file_path,
            version,
            len(publication.spine),
            len(publication.resources),
            len(diagnostics),
        )
        return OPFParseResult(publication=publication, diagnostics=tuple(diagnostics))
