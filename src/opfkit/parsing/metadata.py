"""Metadata extraction from the package <metadata> element."""

from __future__ import annotations

from lxml import etree

from opfkit.models import Contributor, Diagnostic, Metadata, warning
from opfkit.parsing.document import attribute, child, children, first_text, text, texts

# MARC relator codes mapped to the Metadata field collecting them.
_ROLE_FIELDS: dict[str, str] = {
    "aut": "authors",
    "trl": "translators",
    "edt": "editors",
    "art": "artists",
    "ill": "illustrators",
    "clr": "colorists",
    "nrt": "narrators",
    "pbl": "publishers",
}

_CONTRIBUTOR_FIELDS = (
    "authors",
    "translators",
    "editors",
    "artists",
    "illustrators",
    "colorists",
    "narrators",
    "publishers",
    "contributors",
)

_MODIFICATION_EVENT = "modification"


class MetadataParser:
    """Field rules whose encoding differs between EPUB 2 and EPUB 3 packages.

    EPUB 3 qualifies elements through ``<meta refines="#id" property="...">``
    siblings; EPUB 2 uses ``opf:`` attributes on the element itself.
    """

    def __init__(self, metadata: etree._Element | None, version: float) -> None:
        self._metadata = metadata
        self._version = version
        self._refinements = self._collect_refinements()

    @property
    def is_epub3(self) -> bool:
        return self._version >= 3

    def main_title(self) -> str | None:
        titles = children(self._metadata, "dc:title")
        if self.is_epub3:
            for title in titles:
                if self._refined(title, "title-type") == "main":
                    value = text(title)
                    if value:
                        return value
        return first_text(titles)

    def unique_identifier(self, unique_identifier_id: str | None) -> str | None:
        identifiers = children(self._metadata, "dc:identifier")
        if unique_identifier_id:
            for identifier in identifiers:
                if identifier.get("id") == unique_identifier_id:
                    value = text(identifier)
                    if value:
                        return value
        return first_text(identifiers)

    def publication_date(self) -> str | None:
        dates = [
            date
            for date in children(self._metadata, "dc:date")
            if attribute(date, "opf:event") != _MODIFICATION_EVENT
        ]
        return first_text(dates)

    def modified_date(self) -> str | None:
        from_meta = first_text(
            [
                meta
                for meta in children(self._metadata, "meta")
                if attribute(meta, "property") == "dcterms:modified" and not attribute(meta, "refines")
            ]
        )
        from_event = first_text(
            [
                date
                for date in children(self._metadata, "dc:date")
                if attribute(date, "opf:event") == _MODIFICATION_EVENT
            ]
        )
        if self.is_epub3:
            return from_meta or from_event
        return from_event or from_meta

    def subjects(self) -> list[str]:
        unique: list[str] = []
        for subject in texts(children(self._metadata, "dc:subject")):
            if subject not in unique:
                unique.append(subject)
        return unique

    def contributors(self) -> dict[str, list[Contributor]]:
        """Group publishers, creators and contributors by their relator role."""

        grouped: dict[str, list[Contributor]] = {name: [] for name in _CONTRIBUTOR_FIELDS}
        for element in children(self._metadata, "dc:publisher"):
            contributor = self._contributor(element)
            if contributor is not None:
                grouped["publishers"].append(contributor)

        for tag, fallback in (("dc:creator", "authors"), ("dc:contributor", "contributors")):
            for element in children(self._metadata, tag):
                contributor = self._contributor(element)
                if contributor is None:
                    continue
                grouped[_ROLE_FIELDS.get(contributor.role or "", fallback)].append(contributor)
        return grouped

    def rendition_properties(self) -> list[str]:
        properties: list[str] = []
        for meta in children(self._metadata, "meta"):
            name = attribute(meta, "property")
            if not name or not name.startswith("rendition:") or attribute(meta, "refines"):
                continue
            value = text(meta)
            if value:
                properties.append(f"{name}={value}")
        return properties

    def _contributor(self, element: etree._Element) -> Contributor | None:
        name = text(element)
        if not name:
            return None
        role = attribute(element, "opf:role")
        if not role and self.is_epub3:
            role = self._refined(element, "role")
        sort_as = attribute(element, "opf:file-as") or self._refined(element, "file-as")
        return Contributor(name=name, sort_as=sort_as, role=role.strip().lower() if role else None)

    def _collect_refinements(self) -> dict[str, list[tuple[str, str]]]:
        refinements: dict[str, list[tuple[str, str]]] = {}
        for meta in children(self._metadata, "meta"):
            target = attribute(meta, "refines")
            name = attribute(meta, "property")
            if not target or not name or not target.startswith("#"):
                continue
            refinements.setdefault(target[1:], []).append((name, text(meta)))
        return refinements

    def _refined(self, element: etree._Element, name: str) -> str | None:
        element_id = element.get("id")
        if not element_id:
            return None
        for property_name, value in self._refinements.get(element_id, []):
            if property_name == name and value:
                return value
        return None


def extract_metadata(root: etree._Element, version: float) -> tuple[Metadata, list[Diagnostic]]:
    """Build the Metadata record for a package; absent fields stay ``None``."""

    diagnostics: list[Diagnostic] = []
    direction = attribute(child(root, "spine"), "page-progression-direction")

    metadata_element = child(root, "metadata")
    if metadata_element is None:
        diagnostics.append(warning("metadata-missing", "Package has no <metadata> element"))
        return Metadata(direction=direction), diagnostics

    parser = MetadataParser(metadata_element, version)

    title = parser.main_title()
    if title is None:
        diagnostics.append(warning("metadata-missing-title", "No usable <dc:title> in metadata"))

    unique_identifier_id = attribute(root, "unique-identifier")
    identifier = parser.unique_identifier(unique_identifier_id)
    if identifier is None:
        diagnostics.append(
            warning("metadata-missing-identifier", "No usable <dc:identifier> in metadata", unique_identifier_id)
        )

    rights = " ".join(texts(children(metadata_element, "dc:rights")))
    people = parser.contributors()

    metadata = Metadata(
        title=title,
        identifier=identifier,
        description=first_text(children(metadata_element, "dc:description")),
        publication_date=parser.publication_date(),
        modified=parser.modified_date(),
        source=first_text(children(metadata_element, "dc:source")),
        rights=rights or None,
        subjects=tuple(parser.subjects()),
        languages=tuple(texts(children(metadata_element, "dc:language"))),
        authors=tuple(people["authors"]),
        translators=tuple(people["translators"]),
        editors=tuple(people["editors"]),
        artists=tuple(people["artists"]),
        illustrators=tuple(people["illustrators"]),
        colorists=tuple(people["colorists"]),
        narrators=tuple(people["narrators"]),
        publishers=tuple(people["publishers"]),
        contributors=tuple(people["contributors"]),
        direction=direction,
        rendition=tuple(parser.rendition_properties()),
    )
    return metadata, diagnostics
