"""Output formatters — template text and NDJSON.

Templates use str.format fields over the record's closed field set:
    {time} {server_name} {snote} {text} {path} {dir} {filename} {line} {output}
"""

from __future__ import annotations

import json
import string
from typing import Protocol

from snote_grep.domain.errors import RenderError, TemplateError
from snote_grep.domain.models import DEFAULT_TEMPLATE, RECORD_FIELDS, Record

FIELD_HELP = {
    "time": "The time the notice was received",
    "server_name": "The name of the server that sent the notice",
    "snote": "The notice type that occurred",
    "text": "The content of the notice",
    "path": "The full path to the file the notice was found in",
    "filename": "The name of the file the notice was found in",
    "dir": "The directory the notice was found in",
    "line": "The full matched line",
    "output": "The line as emitted after --strip / --filename (default)",
}


class Formatter(Protocol):
    """Renders a Record into the text written to the output destination."""

    def render(self, record: Record) -> str:
        ...


def _template_fields(template: str) -> list[str]:
    """Return the top-level field names a template references."""
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as err:
        raise TemplateError(f"Malformed template {template!r}: {err}") from err

    fields = []
    for _literal, field_name, _spec, _conversion in parsed:
        if field_name is None:
            continue
        if field_name == "" or field_name.isdigit():
            raise TemplateError(
                f"Template fields must be named (e.g. {{line}}), got {{{field_name}}}"
            )
        # "{path.upper}" and "{line[0]}" resolve against the base field
        base = field_name.split(".", 1)[0].split("[", 1)[0]
        fields.append(base)
    return fields


class RecordFormatter:
    """Render records through a str.format template."""

    def __init__(self, template: str = DEFAULT_TEMPLATE) -> None:
        unknown = sorted({f for f in _template_fields(template) if f not in RECORD_FIELDS})
        if unknown:
            raise TemplateError(
                f"Unknown template field(s): {', '.join(unknown)}. "
                f"Available: {', '.join(RECORD_FIELDS)}"
            )
        self.template = template

    def render(self, record: Record) -> str:
        try:
            return self.template.format_map(record.as_fields())
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as err:
            raise RenderError(f"could not render {record.path}: {err}") from err


class JsonFormatter:
    """Render each record as one compact JSON object (NDJSON, jq friendly)."""

    def render(self, record: Record) -> str:
        return json.dumps(record.as_fields(), ensure_ascii=False)


def get_formatter(template: str = DEFAULT_TEMPLATE, as_json: bool = False) -> Formatter:
    """Factory that returns the right formatter for the options given."""
    if as_json:
        return JsonFormatter()
    return RecordFormatter(template)
