from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from loguru import logger

from services.data_provider import (
	DataProvider,
	FilterCriteria,
	ProviderError,
	RecordRow,
	build_outbound_query,
)
from services.logging_setup import summarize_for_log
from services.record_fields import get_val, row_key


NotifyFn = Callable[[str], None]
ChangeFn = Callable[[], None]


@dataclass(frozen=True)
class PageInfo:
	current_page: int
	total_pages: int
	total_count: int


class SearchListController:
	"""
	Search -> fetch -> paginate -> display flow shared by all list screens.

	Holds filter inputs, the last fetched result set, a client-side text
	filter, the current page and the selected record. Views are derived on
	every read and never mutate the result set.

	Fetches are not serialized: two overlapping searches both apply their
	result when they resolve, so the one resolving last wins. Pass
	``ignore_stale_responses=True`` to drop responses of superseded requests.
	"""

	def __init__(
		self,
		provider: DataProvider,
		*,
		filter_fields: Sequence[str] = (),
		page_size: int = 15,
		text_filter_fields: Sequence[str] = ("name",),
		id_fields: Sequence[str] = ("id",),
		title: str = "records",
		notify: Optional[NotifyFn] = None,
		require_criteria: bool = False,
		missing_criteria_message: str = "Enter a search value",
		ignore_stale_responses: bool = False,
	) -> None:
		if int(page_size) < 1:
			raise ValueError(f"page_size must be >= 1, got {page_size!r}")

		self._provider = provider
		self._filter_fields = tuple(filter_fields)
		self.page_size = int(page_size)
		self.text_filter_fields = tuple(text_filter_fields)
		self.id_fields = tuple(id_fields)
		self.title = title
		self.require_criteria = require_criteria
		self.missing_criteria_message = missing_criteria_message
		self.ignore_stale_responses = ignore_stale_responses

		self._notify = notify
		self._listeners: list[ChangeFn] = []
		self.notifications: list[str] = []

		self._criteria: FilterCriteria = dict.fromkeys(self._filter_fields)
		self._rows: tuple[RecordRow, ...] = ()
		self._selected: Optional[RecordRow] = None
		self._local_text = ""
		self._current_page = 1
		self._has_searched = False

		self._in_flight = 0
		self._request_seq = 0

		self._log = logger.bind(component="SearchListController", list=title)

	# ------------------------------------------------------------------ State

	@property
	def criteria(self) -> FilterCriteria:
		return dict(self._criteria)

	@property
	def result_set(self) -> tuple[RecordRow, ...]:
		return self._rows

	@property
	def selected_record(self) -> Optional[RecordRow]:
		return self._selected

	@property
	def local_text_filter(self) -> str:
		return self._local_text

	@property
	def busy(self) -> bool:
		return self._in_flight > 0

	@property
	def has_searched(self) -> bool:
		return self._has_searched

	@property
	def provider(self) -> DataProvider:
		return self._provider

	def on_change(self, callback: ChangeFn) -> Callable[[], None]:
		"""Register a state-change listener; returns a function that removes it."""
		self._listeners.append(callback)

		def _unsubscribe() -> None:
			if callback in self._listeners:
				self._listeners.remove(callback)
		return _unsubscribe

	def row_key(self, row: RecordRow) -> str:
		return row_key(row, self.id_fields)

	# ------------------------------------------------------------------ Inputs

	def update_filter(self, field: str, value: Any) -> None:
		if isinstance(value, str):
			value = value.strip()
		self._criteria[field] = value
		self._emit_change()

	def set_local_text_filter(self, text: str | None) -> None:
		self._local_text = str(text or "")
		self._current_page = self._clamp_page(self._current_page)
		self._emit_change()

	def go_to_page(self, page: int) -> None:
		self._current_page = self._clamp_page(int(page))
		self._emit_change()

	def select_record(self, row: RecordRow) -> None:
		if not any(r is row for r in self._rows):
			raise ValueError("selected row is not part of the current result set")
		self._selected = row
		self._emit_change()

	def clear_selection(self) -> None:
		self._selected = None
		self._emit_change()

	def reset(self) -> None:
		"""Back to the initial state. In-flight fetches are not cancelled."""
		self._criteria = dict.fromkeys(self._filter_fields)
		self._rows = ()
		self._selected = None
		self._local_text = ""
		self._current_page = 1
		self._has_searched = False
		self._log.debug("[reset] - state_cleared")
		self._emit_change()

	# ------------------------------------------------------------------ Fetching

	async def search(self) -> bool:
		query = build_outbound_query(self._criteria)
		if self.require_criteria and not query:
			self._log.info("[search] - rejected_without_criteria")
			self._record_notification(self.missing_criteria_message)
			return False
		return await self._run_fetch(query, action="search")

	async def fetch_all(self) -> bool:
		return await self._run_fetch({}, action="fetch_all")

	async def _run_fetch(self, query: FilterCriteria, *, action: str) -> bool:
		self._request_seq += 1
		seq = self._request_seq
		self._in_flight += 1
		self._has_searched = True
		self._log.info(f"[{action}] - fetch_started - seq={seq} criteria={summarize_for_log(query)}")
		self._emit_change()

		try:
			rows = await self._provider.fetch(dict(query))
		except ProviderError as exc:
			self._log.warning(f"[{action}] - fetch_failed - seq={seq} error={exc}")
			self._record_notification(f"Failed to fetch {self.title}: {exc}")
			return False
		except Exception:
			self._log.exception(f"[{action}] - fetch_crashed - seq={seq}")
			self._record_notification("An unexpected error occurred")
			return False
		else:
			if self.ignore_stale_responses and seq != self._request_seq:
				self._log.debug(f"[{action}] - stale_response_ignored - seq={seq} latest={self._request_seq}")
				return False
			self._rows = tuple(rows or ())
			self._current_page = 1
			self._selected = None
			self._has_searched = True
			self._log.info(f"[{action}] - fetch_applied - seq={seq} rows={len(self._rows)}")
			return True
		finally:
			self._in_flight = max(0, self._in_flight - 1)
			self._emit_change()

	# ------------------------------------------------------------------ Derived view

	@property
	def filtered_rows(self) -> list[RecordRow]:
		needle = self._local_text.lower()
		if not needle:
			return list(self._rows)
		return [
			r for r in self._rows
			if needle in str(get_val(r, self.text_filter_fields, "")).lower()
		]

	@property
	def total_pages(self) -> int:
		return max(1, math.ceil(len(self.filtered_rows) / self.page_size))

	@property
	def current_page(self) -> int:
		return self._clamp_page(self._current_page)

	@property
	def visible_rows(self) -> list[RecordRow]:
		start = (self.current_page - 1) * self.page_size
		return self.filtered_rows[start:start + self.page_size]

	@property
	def page_info(self) -> PageInfo:
		filtered = self.filtered_rows
		total_pages = max(1, math.ceil(len(filtered) / self.page_size))
		return PageInfo(
			current_page=min(max(1, self._current_page), total_pages),
			total_pages=total_pages,
			total_count=len(filtered),
		)

	# ------------------------------------------------------------------ Internals

	def _clamp_page(self, page: int) -> int:
		return min(max(1, page), self.total_pages)

	def _record_notification(self, message: str) -> None:
		self.notifications.append(message)
		if self._notify is None:
			return
		try:
			self._notify(message)
		except Exception:
			self._log.exception("[_record_notification] - notify_callback_failed")

	def _emit_change(self) -> None:
		for callback in list(self._listeners):
			try:
				callback()
			except Exception:
				self._log.exception("[_emit_change] - listener_failed")
