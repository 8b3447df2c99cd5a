from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from loguru import logger

from services.data_provider import ProviderError, RecordRow
from services.record_fields import get_val
from services.screens import DetailSection, ScreenSpec


@dataclass(frozen=True)
class SectionRows:
	section: DetailSection
	rows: tuple[RecordRow, ...]
	total: Optional[Decimal] = None
	error: str = ""


@dataclass(frozen=True)
class RecordDetail:
	row: Mapping[str, Any]
	sections: tuple[SectionRows, ...] = ()


def section_total(section: DetailSection, rows: tuple[RecordRow, ...]) -> Optional[Decimal]:
	if not section.total_column:
		return None
	column = next((c for c in section.columns if c.name == section.total_column), None)
	keys = column.keys if column else (section.total_column,)
	total = Decimal("0")
	for row in rows:
		try:
			total += Decimal(str(get_val(row, keys, 0)))
		except InvalidOperation:
			continue
	return total


async def load_record_detail(provider: Any, screen: ScreenSpec, row: Mapping[str, Any]) -> RecordDetail:
	"""
	Load the child sections of one record.

	A section that fails to load is returned empty with its error text; the
	header record is always shown.
	"""
	if not screen.detail_sections:
		return RecordDetail(row=row)

	log = logger.bind(component="RecordDetail", screen=screen.key)
	parent_id = get_val(row, ("id",), None)
	fetch_children = getattr(provider, "fetch_children", None)

	sections: list[SectionRows] = []
	for section in screen.detail_sections:
		if parent_id is None or fetch_children is None:
			sections.append(SectionRows(section, (), section_total(section, ())))
			continue
		try:
			rows = tuple(await fetch_children(section.collection, section.parent_column, parent_id))
		except ProviderError as exc:
			log.warning(f"[load_record_detail] - section_failed - section={section.key} parent={parent_id} error={exc}")
			sections.append(SectionRows(section, (), section_total(section, ()), error=str(exc)))
			continue
		log.debug(f"[load_record_detail] - section_loaded - section={section.key} parent={parent_id} rows={len(rows)}")
		sections.append(SectionRows(section, rows, section_total(section, rows)))

	return RecordDetail(row=row, sections=tuple(sections))
