"""Namespace-aware access to a parsed OPF package tree.

Lookups accept prefixed names (``dc:title``, ``opf:role``) or bare OPF names
(``item``, ``idref``). Every helper tolerates a missing element so callers can
chain lookups through absent subtrees without guarding each step.
"""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

from opfkit.parsing.normalization import normalize_whitespace

OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"

# OEBPS 1.x packages use the 1.0 Dublin Core namespace.
_NAMESPACES: dict[str, tuple[str, ...]] = {
    "dc": (DC_NS, "http://purl.org/dc/elements/1.0/"),
    "opf": (OPF_NS, "http://openebook.org/namespaces/oeb-package/1.0/"),
}


@dataclass(slots=True)
class PackageDocumentError(Exception):
    """The package document could not be parsed as XML."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


def load_package_document(data: bytes, *, source: str = "package.opf") -> etree._Element:
    """Parse raw OPF bytes and return the root element."""

    parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)
    try:
        return etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise PackageDocumentError(source, f"Malformed package document: {exc}") from exc


def package_version(root: etree._Element, default: float) -> float:
    """Read ``package/@version`` as a number, falling back to ``default``."""

    raw = attribute(root, "version")
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _matches(node: etree._Element, name: str) -> bool:
    if not isinstance(node.tag, str):
        return False
    qname = etree.QName(node)
    prefix, _, local = name.rpartition(":")
    if qname.localname != local:
        return False
    if prefix:
        return qname.namespace in _NAMESPACES[prefix]
    return qname.namespace not in _NAMESPACES["dc"]


def children(element: etree._Element | None, name: str) -> list[etree._Element]:
    """Direct child elements called ``name``, in document order."""

    if element is None:
        return []
    return [node for node in element.iterchildren() if _matches(node, name)]


def child(element: etree._Element | None, name: str) -> etree._Element | None:
    """First direct child element called ``name``."""

    if element is None:
        return None
    for node in element.iterchildren():
        if _matches(node, name):
            return node
    return None


def attribute(element: etree._Element | None, name: str) -> str | None:
    if element is None:
        return None
    prefix, _, local = name.rpartition(":")
    if not prefix:
        return element.get(local)
    for namespace in _NAMESPACES[prefix]:
        value = element.get(f"{{{namespace}}}{local}")
        if value is not None:
            return value
    # Some producers drop the namespace declaration and write the bare name.
    return element.get(local)


def text(element: etree._Element | None) -> str:
    """Whitespace-normalized text content, or an empty string."""

    if element is None:
        return ""
    return normalize_whitespace(" ".join(element.itertext()))


def texts(elements: list[etree._Element]) -> list[str]:
    """Non-empty text values of ``elements``, in order."""

    values: list[str] = []
    for element in elements:
        value = text(element)
        if value:
            values.append(value)
    return values


def first_text(elements: list[etree._Element]) -> str | None:
    for element in elements:
        value = text(element)
        if value:
            return value
    return None
