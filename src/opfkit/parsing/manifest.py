"""Resource extraction from the package <manifest> element."""

from __future__ import annotations

from lxml import etree

from opfkit.models import Diagnostic, Link, ManifestEntry, info, warning
from opfkit.parsing.document import attribute, child, children, text
from opfkit.parsing.normalization import split_tokens

# Manifest item properties that become relation tags instead of opaque properties.
_PROPERTY_RELATIONS: dict[str, str] = {
    "nav": "contents",
    "cover-image": "cover",
}


def find_cover_id(root: etree._Element) -> str | None:
    """Manifest id named by the first ``<meta name="cover">``, if any."""

    for meta in children(child(root, "metadata"), "meta"):
        if attribute(meta, "name") != "cover":
            continue
        cover_id = (attribute(meta, "content") or text(meta)).strip()
        return cover_id or None
    return None


def link_from_item(item: etree._Element, *, is_cover: bool = False) -> Link:
    rel: list[str] = []
    properties: list[str] = []
    for token in split_tokens(attribute(item, "properties")):
        relation = _PROPERTY_RELATIONS.get(token)
        if relation is None:
            properties.append(token)
        elif relation not in rel:
            rel.append(relation)
    if is_cover and "cover" not in rel:
        rel.append("cover")

    return Link(
        href=attribute(item, "href"),
        media_type=attribute(item, "media-type"),
        rel=tuple(rel),
        properties=tuple(properties),
    )


def extract_resources(
    manifest: etree._Element | None,
    cover_id: str | None,
) -> tuple[list[ManifestEntry], list[Link], list[Diagnostic]]:
    """Turn manifest items into resources.

    Returns the manifest entries in document order (id paired with resource),
    the cover-tagged links for the publication's top-level link list, and the
    diagnostics raised for skipped or suspicious items.
    """

    diagnostics: list[Diagnostic] = []
    items = children(manifest, "item")
    if not items:
        diagnostics.append(warning("manifest-empty", "Manifest has no <item> elements"))
        return [], [], diagnostics

    entries: list[ManifestEntry] = []
    cover_links: list[Link] = []
    seen_ids: set[str] = set()

    for item in items:
        item_id = attribute(item, "id")
        if not item_id:
            diagnostics.append(
                info(
                    "manifest-item-missing-id",
                    "Manifest item has no id and cannot be referenced, item ignored",
                    attribute(item, "href"),
                )
            )
            continue

        if item_id in seen_ids:
            diagnostics.append(
                info("manifest-duplicate-id", f"Manifest id {item_id!r} is used more than once", item_id)
            )
        seen_ids.add(item_id)

        link = link_from_item(item, is_cover=item_id == cover_id)
        if "cover" in link.rel:
            cover_links.append(link)
        entries.append(ManifestEntry(item_id=item_id, link=link))

    return entries, cover_links, diagnostics
