from __future__ import annotations

import asyncio
import json
import os
import threading
from typing import Any, Callable, List, Optional, Sequence, Tuple

from loguru import logger

from services.data_provider import (
	FilterCriteria,
	FilterField,
	ProviderError,
	RecordRow,
	build_clauses,
	match_row,
	sort_rows,
)
from services.logging_setup import log_timing


SeedFn = Callable[[str], List[RecordRow]]

_store_lock = threading.RLock()


class BridgeDataProvider:
	"""
	DataProvider backed by the local host-process store.

	Every collection is one JSON file ``<data_dir>/<collection>.json``
	holding a list of objects. The file is re-read on each fetch so edits
	made by the host process show up on the next search.
	"""

	def __init__(
		self,
		data_dir: str,
		collection: str,
		fields: Sequence[FilterField],
		*,
		order_by: Optional[Tuple[str, bool]] = None,
		seed: Optional[SeedFn] = None,
	) -> None:
		self.data_dir = data_dir
		self.collection = collection
		self.fields = tuple(fields)
		self.order_by = order_by
		self._seed = seed
		self._log = logger.bind(component="BridgeDataProvider", collection=collection)

	@property
	def path(self) -> str:
		return os.path.join(self.data_dir, f"{self.collection}.json")

	async def fetch(self, criteria: FilterCriteria) -> List[RecordRow]:
		return await asyncio.to_thread(self._query, dict(criteria))

	async def fetch_children(self, collection: str, parent_column: str, parent_id: Any) -> List[RecordRow]:
		return await asyncio.to_thread(self._children, collection, parent_column, str(parent_id))

	def _query(self, criteria: FilterCriteria) -> List[RecordRow]:
		clauses = build_clauses(criteria, self.fields)
		with log_timing("BridgeDataProvider._query", collection=self.collection, clauses=len(clauses)):
			rows = self._load(self.collection)
			matched = [r for r in rows if match_row(r, clauses)]
		self._log.debug(f"[_query] - matched - total={len(rows)} matched={len(matched)}")
		return sort_rows(matched, self.order_by)

	def _children(self, collection: str, parent_column: str, parent_id: str) -> List[RecordRow]:
		rows = self._load(collection)
		matched = [r for r in rows if r.get(parent_column) is not None and str(r.get(parent_column)) == parent_id]
		self._log.debug(
			f"[_children] - matched - collection={collection} parent={parent_column}={parent_id} rows={len(matched)}"
		)
		return matched

	def _load(self, collection: str) -> List[RecordRow]:
		path = os.path.join(self.data_dir, f"{collection}.json")
		with _store_lock:
			if not os.path.exists(path):
				self._initialize_store(collection)
				if not os.path.exists(path):
					return []
			try:
				with open(path, "r", encoding="utf-8") as f:
					raw = json.load(f)
			except (OSError, ValueError) as exc:
				raise ProviderError(f"Local store for {collection} is unreadable: {exc}") from exc

		if not isinstance(raw, list):
			raise ProviderError(f"Local store for {collection} must contain a list of records")
		return [r for r in raw if isinstance(r, dict)]

	def _initialize_store(self, collection: str) -> None:
		if self._seed is None:
			return
		rows = self._seed(collection)
		if not rows:
			return
		try:
			path = write_collection(self.data_dir, collection, rows)
		except OSError as exc:
			raise ProviderError(f"Cannot create local store for {collection}: {exc}") from exc
		self._log.info(f"[_initialize_store] - seeded - path={path} rows={len(rows)}")


def write_collection(data_dir: str, collection: str, rows: Sequence[Any]) -> str:
	path = os.path.join(data_dir, f"{collection}.json")
	with _store_lock:
		os.makedirs(data_dir, exist_ok=True)
		with open(path, "w", encoding="utf-8") as f:
			json.dump(list(rows), f, indent=2, ensure_ascii=False, default=str)
	return path
