from __future__ import annotations

import json
from pathlib import Path

from opfkit.cli.inspect_package import main as inspect_main

_OPF = (
    '<package xmlns="http://www.idpf.org/2007/opf" xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'version="3.0" unique-identifier="uid">'
    "<metadata><dc:title>CLI Book</dc:title><dc:identifier id='uid'>urn:cli</dc:identifier>"
    "<dc:language>en</dc:language><dc:language>fr</dc:language></metadata>"
    "<manifest>"
    '<item id="c1" href="c1.xhtml" media-type="application/xhtml+xml"/>'
    '<item id="c2" href="c2.xhtml" media-type="application/xhtml+xml"/>'
    "</manifest>"
    '<spine><itemref idref="c2"/><itemref idref="c1" linear="no"/><itemref idref="c3"/></spine>'
    "</package>"
)


def test_cli_prints_publication_json(tmp_path: Path, capsys: object, monkeypatch: object) -> None:
    monkeypatch.delenv("OPFKIT_DEFAULT_VERSION", raising=False)
    package = tmp_path / "content.opf"
    package.write_text(_OPF, encoding="utf-8")

    exit_code = inspect_main(["--path", str(package)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["root_file"] == "content.opf"
    assert payload["version"] == 3.0
    assert payload["publication"]["metadata"]["title"] == "CLI Book"
    assert payload["publication"]["metadata"]["languages"] == ["en", "fr"]
    assert [link["href"] for link in payload["publication"]["spine"]] == ["c2.xhtml"]
    assert [link["href"] for link in payload["publication"]["resources"]] == ["c1.xhtml"]
    assert [item["code"] for item in payload["diagnostics"]] == ["spine-unresolved-idref"]


def test_cli_fail_on_warning_and_version_override(tmp_path: Path, capsys: object) -> None:
    package = tmp_path / "content.opf"
    package.write_text(_OPF, encoding="utf-8")

    exit_code = inspect_main(["--path", str(package), "--package-version", "2.0", "--fail-on-warning"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 2
    assert payload["version"] == 2.0


def test_cli_reports_unreadable_input(tmp_path: Path, capsys: object) -> None:
    missing = tmp_path / "missing.epub"

    exit_code = inspect_main(["--path", str(missing)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["path"] == str(missing)
    assert "No such file" in payload["error"]
