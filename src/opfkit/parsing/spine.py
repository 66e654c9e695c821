"""Spine resolution: join <itemref> entries to manifest resources.

Resolution is two-phase. The scan marks which manifest entries the spine
claims, in spine order; the remaining resources are rebuilt afterwards in
manifest order. Manifest entries are never mutated.
"""

from __future__ import annotations

from lxml import etree

from opfkit.models import Diagnostic, Link, ManifestEntry, info, warning
from opfkit.parsing.document import attribute, children


def is_linear(itemref: etree._Element) -> bool:
    linear = attribute(itemref, "linear")
    return linear is None or linear.strip().lower() != "no"


def resolve_spine(
    spine: etree._Element | None,
    entries: list[ManifestEntry],
) -> tuple[list[Link], list[Link], list[Diagnostic]]:
    """Return ``(spine_links, remaining_resources, diagnostics)``.

    Each linear ``itemref`` claims the first unclaimed manifest entry with a
    matching id, so duplicated manifest ids resolve first-match-wins.
    """

    diagnostics: list[Diagnostic] = []
    itemrefs = children(spine, "itemref")
    if not itemrefs:
        diagnostics.append(warning("spine-empty", "Spine has no <itemref> elements"))
        return [], [entry.link for entry in entries], diagnostics

    unclaimed: dict[str, list[int]] = {}
    for index, entry in enumerate(entries):
        unclaimed.setdefault(entry.item_id, []).append(index)

    claimed: set[int] = set()
    spine_links: list[Link] = []

    for itemref in itemrefs:
        idref = attribute(itemref, "idref")
        if not idref:
            diagnostics.append(info("spine-itemref-missing-idref", "Spine itemref has no idref, entry ignored"))
            continue
        if not is_linear(itemref):
            continue

        candidates = unclaimed.get(idref)
        if not candidates:
            diagnostics.append(
                warning("spine-unresolved-idref", f"Referenced resource for spine item {idref!r} not found", idref)
            )
            continue

        index = candidates.pop(0)
        claimed.add(index)
        spine_links.append(entries[index].link)

    resources = [entry.link for index, entry in enumerate(entries) if index not in claimed]
    return spine_links, resources, diagnostics
