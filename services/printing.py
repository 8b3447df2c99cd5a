from __future__ import annotations

import html
from datetime import datetime
from typing import Any, Mapping, Optional

from services.record_detail import RecordDetail, SectionRows
from services.record_fields import format_money, get_val
from services.screens import ScreenSpec


_PRINT_CSS = """
body { font-family: Arial, Helvetica, sans-serif; margin: 24px; color: #111; }
h1 { font-size: 20px; margin-bottom: 4px; }
h2 { font-size: 15px; margin: 20px 0 6px; }
.meta { color: #555; font-size: 12px; margin-bottom: 16px; }
.total { text-align: right; font-weight: bold; margin-top: 6px; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ccc; padding: 6px 10px; text-align: left; font-size: 13px; }
th { background: #f3f4f6; }
table.fields th { width: 35%; }
"""


def _section_html(part: SectionRows) -> str:
	section = part.section
	head = "".join(f"<th>{html.escape(c.label)}</th>" for c in section.columns)
	if part.rows:
		body = "\n".join(
			"<tr>" + "".join(f"<td>{html.escape(c.display(r))}</td>" for c in section.columns) + "</tr>"
			for r in part.rows
		)
	else:
		body = (
			f"<tr><td colspan=\"{len(section.columns)}\">"
			f"{html.escape(part.error or section.empty_message)}</td></tr>"
		)
	total = ""
	if part.total is not None:
		total = f"<div class=\"total\">Total: {html.escape(format_money(part.total))}</div>\n"
	return (
		f"<h2>{html.escape(section.title)}</h2>\n"
		f"<table><tr>{head}</tr>\n{body}\n</table>\n{total}"
	)


def render_print_html(
	screen: ScreenSpec,
	row: Mapping[str, Any],
	*,
	business_name: str = "",
	printed_at: Optional[datetime] = None,
	detail: Optional[RecordDetail] = None,
) -> str:
	"""Standalone HTML document for one record, ready for window.print()."""
	printed_at = printed_at or datetime.now()
	record_id = get_val(row, screen.id_fields, "-")

	body_rows = "\n".join(
		f"<tr><th>{html.escape(col.label)}</th><td>{html.escape(col.display(row))}</td></tr>"
		for col in screen.detail_fields
	)
	header = html.escape(business_name) if business_name else html.escape(screen.title)
	sections = "".join(_section_html(part) for part in (detail.sections if detail else ()))

	return (
		"<!DOCTYPE html>\n"
		"<html><head><meta charset=\"utf-8\">"
		f"<title>{html.escape(screen.title)} #{html.escape(str(record_id))}</title>"
		f"<style>{_PRINT_CSS}</style></head><body>\n"
		f"<h1>{header}</h1>\n"
		f"<div class=\"meta\"># {html.escape(str(record_id))} &middot; printed "
		f"{printed_at.strftime('%d/%m/%Y %H:%M')}</div>\n"
		f"<table class=\"fields\">\n{body_rows}\n</table>\n"
		f"{sections}"
		"</body></html>\n"
	)
