"""
Export module.

Formats drafts for pasting into external tools.
"""

from content_assistant.export.csv_row import draft_to_csv_row, escape_csv_field, to_csv_row

__all__ = [
    "draft_to_csv_row",
    "escape_csv_field",
    "to_csv_row",
]
