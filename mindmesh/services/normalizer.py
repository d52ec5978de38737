"""
Document normalizer.

Turns a source record and its tag names into the canonical, line-oriented text
that gets embedded and shown to the model. Output is a pure function of its
inputs, so unrelated re-syncs never change a document's content.
"""

from datetime import date, datetime
from urllib.parse import urlparse

from mindmesh.models.source import (
    RECORD_TYPES,
    FileRecord,
    NoteRecord,
    ReminderRecord,
    SourceRecord,
    SourceType,
    TaskRecord,
)
from mindmesh.utils.exceptions import ValidationError

MAX_CONTENT_LENGTH = 4000
TRUNCATION_MARKER = "..."
_DEFAULT_PORTS = {"http": 80, "https": 443}


def truncate_text(value: str, max_length: int) -> str:
    """Cut ``value`` so that it, marker included, fits in ``max_length`` characters."""
    if len(value) <= max_length:
        return value
    return f"{value[: max_length - len(TRUNCATION_MARKER)]}{TRUNCATION_MARKER}"


def url_host(url: str | None) -> str:
    """
    Host of a link without a leading ``www.``, plus the port when it is not the default.

    Userinfo is dropped. Unparsable values pass through.
    """
    if not url:
        return ""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError:
        return url
    if not hostname:
        return url
    # IPv6 literals keep their brackets
    if ":" in hostname:
        hostname = f"[{hostname}]"
    if port and port != _DEFAULT_PORTS.get(parsed.scheme):
        hostname = f"{hostname}:{port}"
    return hostname.removeprefix("www.")


def format_tags(tags: list[str]) -> str:
    return f"Tags: {', '.join(tags)}" if tags else ""


def _format_time(value: date | datetime | None) -> str:
    return value.isoformat() if value else ""


def _line(label: str, value: str | None) -> str:
    return f"{label}: {value}" if value else ""


def document_title(record: SourceRecord) -> str:
    """Title stored on the indexed document."""
    if isinstance(record, FileRecord):
        return record.title or record.original_name or ""
    return record.title or ""


def normalize(
    source_type: SourceType,
    record: SourceRecord,
    tags: list[str],
    max_length: int = MAX_CONTENT_LENGTH,
) -> str:
    """
    Build the canonical content for one source record.

    The ``Title:`` line always comes first. Type-specific lines follow only
    when their field is non-empty, then a ``Tags:`` line when tags exist.

    Args:
        source_type: Collection the record comes from
        record: The source record
        tags: Tag names in lookup order
        max_length: Content cap before the truncation marker

    Returns:
        Content text of at most ``max_length`` characters

    Raises:
        ValidationError: If ``record`` is not a record of ``source_type``
    """
    if not isinstance(record, RECORD_TYPES[source_type]):
        raise ValidationError(
            f"Expected a {source_type.value} record, got {type(record).__name__}",
            context={"source_type": source_type.value, "source_id": record.id},
        )

    if isinstance(record, NoteRecord):
        parts = [
            f"Title: {record.title or 'Untitled'}",
            _line("Body", record.body),
        ]
    elif isinstance(record, TaskRecord):
        parts = [
            f"Title: {record.title or 'Untitled task'}",
            _line("Description", record.description),
            _line("Status", record.status),
            _line("Due", _format_time(record.due_date)),
        ]
    elif isinstance(record, FileRecord):
        parts = [
            f"Title: {record.title or record.original_name or 'Untitled file'}",
            _line("Description", record.description),
            _line("Type", record.file_type),
            _line("Mime", record.mime_type),
            _line("Link", url_host(record.url)),
        ]
    elif isinstance(record, ReminderRecord):
        parts = [
            f"Title: {record.title or 'Untitled reminder'}",
            _line("Remind at", _format_time(record.remind_at)),
        ]

    parts.append(format_tags(tags))
    return truncate_text("\n".join(part for part in parts if part), max_length)
