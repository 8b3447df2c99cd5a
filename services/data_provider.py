from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Mapping, Optional, Protocol, Sequence


FilterCriteria = dict[str, Any]
RecordRow = dict[str, Any]


class ProviderError(Exception):
	"""
	Single error kind raised by every DataProvider.

	Covers transport failures and backend-reported query errors alike;
	callers do not distinguish them.
	"""

	def __init__(self, message: str, *, status: int | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.status = status

	def __str__(self) -> str:
		if self.status is not None:
			return f"{self.message} (status={self.status})"
		return self.message


class DataProvider(Protocol):
	async def fetch(self, criteria: FilterCriteria) -> Sequence[RecordRow]:
		...


class ChildRowsProvider(Protocol):
	"""Loads the rows of a child collection that point at one parent record."""

	async def fetch_children(self, collection: str, parent_column: str, parent_id: Any) -> Sequence[RecordRow]:
		...


class MatchOp(StrEnum):
	ILIKE = "ilike"
	EQ = "eq"
	GTE = "gte"
	LTE = "lte"


class FieldKind(StrEnum):
	TEXT = "text"
	DATE = "date"


@dataclass(frozen=True)
class FilterField:
	name: str
	column: str
	op: MatchOp = MatchOp.ILIKE
	kind: FieldKind = FieldKind.TEXT
	label: str = ""
	# further columns matched with OR, e.g. first_name or last_name
	also: tuple[str, ...] = ()


@dataclass(frozen=True)
class Clause:
	column: str
	op: MatchOp
	value: str
	also: tuple[str, ...] = ()

	@property
	def columns(self) -> tuple[str, ...]:
		return (self.column, *self.also)


# ------------------------------------------------------------------ Outbound query

def is_unset(value: Any) -> bool:
	if value is None:
		return True
	if isinstance(value, str):
		return not value.strip()
	return False


def build_outbound_query(criteria: Mapping[str, Any]) -> FilterCriteria:
	"""Keep only the criteria fields that carry a value; strings are trimmed."""
	out: FilterCriteria = {}
	for name, value in criteria.items():
		if is_unset(value):
			continue
		out[name] = value.strip() if isinstance(value, str) else value
	return out


def format_query_value(value: Any) -> str:
	if isinstance(value, datetime):
		return value.date().isoformat()
	if isinstance(value, date):
		return value.isoformat()
	return str(value).strip()


def build_clauses(criteria: Mapping[str, Any], fields: Sequence[FilterField]) -> list[Clause]:
	"""
	Translate outbound criteria into column clauses.

	Criteria names without a matching FilterField are ignored.
	"""
	by_name = {f.name: f for f in fields}
	clauses: list[Clause] = []
	for name, value in build_outbound_query(criteria).items():
		field_def = by_name.get(name)
		if field_def is None:
			continue
		clauses.append(Clause(field_def.column, field_def.op, format_query_value(value), field_def.also))
	return clauses


# ------------------------------------------------------------------ In-memory evaluation

def _date_part(value: Any) -> str:
	return format_query_value(value)[:10]


def _match_value(raw: Any, op: MatchOp, value: str) -> bool:
	if raw is None:
		return False
	if op == MatchOp.ILIKE:
		return value.lower() in str(raw).lower()
	if op == MatchOp.EQ:
		if isinstance(raw, (date, datetime)):
			return _date_part(raw) == value[:10]
		return str(raw) == value
	if op == MatchOp.GTE:
		return _date_part(raw) >= value[:10]
	if op == MatchOp.LTE:
		return _date_part(raw) <= value[:10]
	return False


def match_clause(row: Mapping[str, Any], clause: Clause) -> bool:
	"""True when any of the clause columns matches; a missing column never does."""
	return any(_match_value(row.get(col), clause.op, clause.value) for col in clause.columns)


def match_row(row: Mapping[str, Any], clauses: Sequence[Clause]) -> bool:
	return all(match_clause(row, c) for c in clauses)


def sort_rows(rows: list[RecordRow], order_by: Optional[tuple[str, bool]]) -> list[RecordRow]:
	"""Stable sort by (column, descending); rows missing the column go last."""
	if not order_by:
		return rows
	column, descending = order_by
	present = [r for r in rows if r.get(column) is not None]
	missing = [r for r in rows if r.get(column) is None]
	present.sort(key=lambda r: str(r.get(column)), reverse=descending)
	return present + missing
