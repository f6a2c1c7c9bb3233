from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, Iterable, List

from jinja2 import Environment, select_autoescape

from .errors import FilesystemError
from .types import LicenseBundle, Report

BEGIN_MARKER = "-----BEGIN {name} {version} LICENSES-----"
NEXT_MARKER = "-----NEXT LICENSE-----"
END_MARKER = "-----END {name} {version} LICENSES-----"

env = Environment(autoescape=select_autoescape(["html", "xml"]))


def read_license_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"failed to read license file `{path}`: {exc}", path=path) from exc


def _column_width(longest_name: int) -> int:
    for width in (8, 16, 24):
        if longest_name <= width:
            return width
    return 32


def _table_line(width: int, name: str, version: str, licenses: str) -> str:
    return f"{name:<{width}} | {version:<8} | {licenses}"


def render_table(report: Report) -> str:
    width = _column_width(report.longest_name)
    lines = [_table_line(width, "Name", "Version", "Licenses"), "-" * 80]
    for row in report.rows:
        lines.append(_table_line(width, row.name, row.version, row.licenses))
    return "\n".join(lines) + "\n"


def render_bundle(bundle: LicenseBundle) -> bytes:
    """Render one dependency's license files between BEGIN/END markers."""

    chunks: list[bytes] = [BEGIN_MARKER.format(name=bundle.name, version=bundle.version).encode() + b"\n"]
    for index, path in enumerate(bundle.files):
        if index:
            chunks.append(NEXT_MARKER.encode() + b"\n")
        body = read_license_file(path)
        chunks.append(body)
        if not body.endswith(b"\n"):
            chunks.append(b"\n")
    chunks.append(END_MARKER.format(name=bundle.name, version=bundle.version).encode() + b"\n")
    return b"".join(chunks)


def render_license_dump(bundles: Iterable[LicenseBundle]) -> bytes:
    return b"".join(render_bundle(bundle) + b"\n" for bundle in bundles if bundle.files)


def render_text(report: Report) -> bytes:
    return render_table(report).encode() + b"\n" + render_license_dump(report.bundles)


def _license_texts(report: Report) -> Dict[tuple[str, str], List[dict]]:
    texts: dict[tuple[str, str], list[dict]] = {}
    for bundle in report.non_empty_bundles():
        texts[(bundle.name, bundle.version)] = [
            {"path": str(path), "text": read_license_file(path).decode("utf-8", errors="replace")}
            for path in bundle.files
        ]
    return texts


def _dependency_rows(report: Report) -> Iterable[dict]:
    texts = _license_texts(report)
    for row in report.rows:
        yield {
            "name": row.name,
            "version": row.version,
            "licenses": row.licenses,
            "license_files": texts.get((row.name, row.version), []),
        }


def render_json(report: Report) -> str:
    return json.dumps({"dependencies": list(_dependency_rows(report))}, indent=2)


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|")


def _md_fence(text: str) -> str:
    # the fence must be longer than any backtick run inside the body
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    return "`" * max(3, longest + 1)


def render_markdown(report: Report) -> str:
    lines = ["# Bill of Materials", "", "| Name | Version | Licenses |", "| --- | --- | --- |"]
    rows = list(_dependency_rows(report))
    for row in rows:
        lines.append(f"| {_md_cell(row['name'])} | {_md_cell(row['version'])} | {_md_cell(row['licenses'])} |")

    with_files = [row for row in rows if row["license_files"]]
    if with_files:
        lines.append("\n## License texts\n")
    for row in with_files:
        lines.append(f"### {row['name']} {row['version']}\n")
        for license_file in row["license_files"]:
            lines.append(f"`{Path(license_file['path']).name}`\n")
            body = license_file["text"].rstrip("\n")
            fence = _md_fence(body)
            lines.append(fence)
            lines.append(body)
            lines.append(fence + "\n")

    return "\n".join(lines) + "\n"


def render_html(report: Report) -> str:
    template = env.from_string(
        """
<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>Bill of Materials</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 2rem; }
    h1, h2, h3 { color: #1f2937; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d1d5db; padding: 0.5rem; }
    th { background: #f3f4f6; text-align: left; }
    pre { background: #f9fafb; border: 1px solid #e5e7eb; padding: 1rem; white-space: pre-wrap; }
  </style>
</head>
<body>
  <h1>Bill of Materials</h1>
  <table>
    <thead><tr><th>Name</th><th>Version</th><th>Licenses</th></tr></thead>
    <tbody>
      {% for row in dependencies %}
      <tr>
        <td>{{ row.name }}</td>
        <td>{{ row.version }}</td>
        <td>{{ row.licenses }}</td>
      </tr>
      {% endfor %}
    </tbody>
  </table>
  {% for row in dependencies if row.license_files %}
  <section>
    <h2>{{ row.name }} {{ row.version }}</h2>
    {% for license_file in row.license_files %}
    <h3>{{ license_file.path }}</h3>
    <pre>{{ license_file.text }}</pre>
    {% endfor %}
  </section>
  {% endfor %}
</body>
</html>
"""
    )

    return template.render(dependencies=list(_dependency_rows(report)))


def render_report(report: Report, fmt: str) -> bytes:
    fmt = fmt.lower()
    if fmt == "text":
        return render_text(report)
    if fmt == "json":
        return render_json(report).encode()
    if fmt in {"md", "markdown"}:
        return render_markdown(report).encode()
    if fmt == "html":
        return render_html(report).encode()
    raise ValueError(f"Unknown report format: {fmt}")


def write_report(report: Report, fmt: str, destination: Path | None) -> bytes:
    output = render_report(report, fmt)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(output)
    return output
