"""
Formatting pipeline: raw payload -> normalized entries -> text.
"""

from clickup_context.formatting.formatters import degraded_entry, extract_items, format_entries
from clickup_context.formatting.payload import clean_text, safe_get, strip_markup, to_iso_date, truncate
from clickup_context.formatting.renderer import render, render_body, render_error

__all__ = [
    "format_entries",
    "extract_items",
    "degraded_entry",
    "safe_get",
    "to_iso_date",
    "strip_markup",
    "truncate",
    "clean_text",
    "render",
    "render_body",
    "render_error",
]
