"""CLI command printing the parsed publication model of an EPUB as JSON."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from opfkit.config import ParserSettings
from opfkit.models import OPFParseResult, Severity
from opfkit.parsing import ContainerError, PackageDocumentError, parse_epub

load_dotenv()

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
}


def report_diagnostics(result: OPFParseResult) -> None:
    for diagnostic in result.diagnostics:
        logger.log(_SEVERITY_LEVELS[diagnostic.severity], "[%s] %s", diagnostic.code, diagnostic.message)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse an EPUB package document and emit the publication as JSON")
    parser.add_argument("--path", required=True, help="EPUB file, exploded EPUB directory or .opf file")
    parser.add_argument("--package-version", type=float, default=None, help="Override the package version attribute")
    parser.add_argument(
        "--fail-on-warning",
        action="store_true",
        help="Exit with status 2 when the package produced warning diagnostics",
    )
    args = parser.parse_args(argv)

    try:
        settings = ParserSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=settings.log_level)

    try:
        result = parse_epub(args.path, settings=settings, version=args.package_version)
    except (ContainerError, PackageDocumentError) as exc:
        logger.error("Failed to parse %s: %s", args.path, exc)
        print(json.dumps({"path": args.path, "error": str(exc)}, ensure_ascii=True, indent=2))
        return 1

    report_diagnostics(result)

    publication = result.publication
    payload = {
        "path": args.path,
        "root_file": publication.source.root_file_path,
        "version": publication.version,
        "publication": publication.to_dict(),
        "diagnostics": [diagnostic.to_dict() for diagnostic in result.diagnostics],
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))

    if args.fail_on_warning and result.warnings:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
