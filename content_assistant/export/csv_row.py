"""
Single-row CSV export for drafts.

The row (title, flair, cleaned content) is meant to be pasted into a
spreadsheet cell range, so it is one comma-joined line with minimal quoting:
a field is wrapped in double quotes, with inner quotes doubled, only when it
contains a comma, a double quote or a newline.
"""

from typing import Iterable

from content_assistant.models.article import Draft

_NEEDS_QUOTING = (",", '"', "\n")


def escape_csv_field(text: str) -> str:
    """Quote a field only when it contains a comma, quote or newline."""
    text = "" if text is None else str(text)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv_row(fields: Iterable[str]) -> str:
    return ",".join(escape_csv_field(f) for f in fields)


def draft_to_csv_row(draft: Draft, cleaned_content: str) -> str:
    """Serialize a draft as `title,flair,content` using already-cleaned content."""
    return to_csv_row([draft.title, draft.flair, cleaned_content])
