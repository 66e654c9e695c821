"""OPF package parsing interfaces."""

from .container import ContainerError, DirectoryContainer, PackageFileContainer, ZipContainer, open_container
from .document import PackageDocumentError, load_package_document, package_version
from .epub import parse_epub
from .opf import ContainerDescriptor, OPFParser

__all__ = [
    "ContainerDescriptor",
    "ContainerError",
    "DirectoryContainer",
    "OPFParser",
    "PackageDocumentError",
    "PackageFileContainer",
    "ZipContainer",
    "load_package_document",
    "open_container",
    "package_version",
    "parse_epub",
]
