from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence


MISSING = "-"
CURRENCY_SYMBOL = "₹"


def get_val(row: Mapping[str, Any] | None, variants: Sequence[str], fallback: Any = "") -> Any:
	"""Return the first non-empty value among the given key variants."""
	if not row:
		return fallback
	for key in variants:
		value = row.get(key)
		if value is not None and value != "":
			return value
	return fallback


def row_key(row: Mapping[str, Any], id_fields: Sequence[str]) -> str:
	key = get_val(row, id_fields, None)
	if key is None:
		# rows without an identifier are keyed by object identity
		return f"row-{id(row)}"
	return str(key)


def _parse_date(value: Any) -> date | None:
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	text = str(value or "").strip()
	if not text:
		return None
	try:
		return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
	except ValueError:
		pass
	try:
		return date.fromisoformat(text[:10])
	except ValueError:
		return None


def format_money(value: Any) -> str:
	if value is None or value == "":
		return MISSING
	try:
		amount = Decimal(str(value))
	except InvalidOperation:
		return str(value)
	return f"{CURRENCY_SYMBOL} {amount:,.2f}"


def format_date(value: Any) -> str:
	parsed = _parse_date(value)
	if parsed is None:
		return str(value) if value not in (None, "") else MISSING
	return parsed.strftime("%d/%m/%Y")


def format_value(value: Any, kind: str = "text") -> str:
	if value is None or value == "":
		return MISSING
	if kind == "money":
		return format_money(value)
	if kind == "date":
		return format_date(value)
	return str(value)
