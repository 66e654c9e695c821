"""Canonical data structures produced by the OPF parsing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """How loudly a caller should surface a diagnostic."""

    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Non-fatal finding recorded while extracting a package document."""

    severity: Severity
    code: str
    message: str
    subject: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "subject": self.subject,
        }


def info(code: str, message: str, subject: str | None = None) -> Diagnostic:
    return Diagnostic(severity=Severity.INFO, code=code, message=message, subject=subject)


def warning(code: str, message: str, subject: str | None = None) -> Diagnostic:
    return Diagnostic(severity=Severity.WARNING, code=code, message=message, subject=subject)


@dataclass(frozen=True, slots=True)
class Link:
    """A publication resource: one manifest item, normalized."""

    href: str | None = None
    media_type: str | None = None
    rel: tuple[str, ...] = ()
    properties: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "href": self.href,
            "type": self.media_type,
            "rel": list(self.rel),
            "properties": list(self.properties),
        }


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """Manifest id paired with its resource, used only to join the spine."""

    item_id: str
    link: Link


@dataclass(frozen=True, slots=True)
class Contributor:
    """A creator, contributor or publisher named in the package metadata."""

    name: str
    sort_as: str | None = None
    role: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"name": self.name, "sort_as": self.sort_as, "role": self.role}


@dataclass(frozen=True, slots=True)
class Metadata:
    """Flat publication metadata read from the <metadata> element."""

    title: str | None = None
    identifier: str | None = None
    description: str | None = None
    publication_date: str | None = None
    modified: str | None = None
    source: str | None = None
    rights: str | None = None
    subjects: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    authors: tuple[Contributor, ...] = ()
    translators: tuple[Contributor, ...] = ()
    editors: tuple[Contributor, ...] = ()
    artists: tuple[Contributor, ...] = ()
    illustrators: tuple[Contributor, ...] = ()
    colorists: tuple[Contributor, ...] = ()
    narrators: tuple[Contributor, ...] = ()
    publishers: tuple[Contributor, ...] = ()
    contributors: tuple[Contributor, ...] = ()
    direction: str | None = None
    rendition: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        people = {
            name: [person.to_dict() for person in getattr(self, name)]
            for name in (
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
        }
        return {
            "title": self.title,
            "identifier": self.identifier,
            "description": self.description,
            "publication_date": self.publication_date,
            "modified": self.modified,
            "source": self.source,
            "rights": self.rights,
            "subjects": list(self.subjects),
            "languages": list(self.languages),
            **people,
            "direction": self.direction,
            "rendition": list(self.rendition),
        }


@dataclass(frozen=True, slots=True)
class PublicationSource:
    """Provenance of a parsed publication inside its container."""

    root_file_path: str
    format: str = "epub"


@dataclass(frozen=True, slots=True)
class Publication:
    """Immutable publication model assembled from one package document."""

    version: float
    source: PublicationSource
    metadata: Metadata = field(default_factory=Metadata)
    links: tuple[Link, ...] = ()
    resources: tuple[Link, ...] = ()
    spine: tuple[Link, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "source": {"format": self.source.format, "root_file_path": self.source.root_file_path},
            "metadata": self.metadata.to_dict(),
            "links": [link.to_dict() for link in self.links],
            "resources": [link.to_dict() for link in self.resources],
            "spine": [link.to_dict() for link in self.spine],
        }


@dataclass(frozen=True, slots=True)
class OPFParseResult:
    """Parsed publication together with every diagnostic raised on the way."""

    publication: Publication
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.severity is Severity.WARNING)
