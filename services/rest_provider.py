from __future__ import annotations

import asyncio
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests
from loguru import logger

from services.data_provider import (
	Clause,
	FilterCriteria,
	FilterField,
	MatchOp,
	ProviderError,
	RecordRow,
	build_clauses,
)
from services.logging_setup import log_timing


SENSITIVE_KEYS = {"authorization", "apikey", "token", "access_token", "refresh_token", "password"}


class _ThreadLocalHttp:
	def __init__(self) -> None:
		self._local = threading.local()

	def session(self) -> requests.Session:
		sess = getattr(self._local, "session", None)
		if sess is None:
			sess = requests.Session()
			setattr(self._local, "session", sess)
		return sess


class RestDataProvider:
	"""
	DataProvider for a hosted PostgREST-style query service.

	Each filter clause becomes one query parameter, e.g.
	``patient_name=ilike.*smith*`` or ``bill_date=eq.2024-05-01``.
	"""

	def __init__(
		self,
		base_url: str,
		collection: str,
		fields: Sequence[FilterField],
		*,
		api_key: str = "",
		order_by: Optional[Tuple[str, bool]] = None,
		base_filters: Optional[Mapping[str, Any]] = None,
		timeout_s: float = 10.0,
		verify_ssl: bool = True,
		http: Optional[_ThreadLocalHttp] = None,
	) -> None:
		self.base_url = str(base_url or "").strip()
		self.collection = collection
		self.fields = tuple(fields)
		self.api_key = api_key
		self.order_by = order_by
		self.base_filters = dict(base_filters or {})
		self.timeout_s = float(timeout_s)
		self.verify_ssl = bool(verify_ssl)
		self._http = http or _ThreadLocalHttp()
		self._log = logger.bind(component="RestDataProvider", collection=collection)

	async def fetch(self, criteria: FilterCriteria) -> List[RecordRow]:
		params = self.build_params(criteria)
		return await asyncio.to_thread(self._request, params, self.collection)

	async def fetch_children(self, collection: str, parent_column: str, parent_id: Any) -> List[RecordRow]:
		params = [("select", "*"), (parent_column, f"eq.{parent_id}")]
		return await asyncio.to_thread(self._request, params, collection)

	# ------------------------------------------------------------------ Request shaping

	@property
	def url(self) -> str:
		return self.collection_url(self.collection)

	def collection_url(self, collection: str) -> str:
		if not self.base_url:
			return ""
		return f"{self.base_url.rstrip('/')}/{collection.lstrip('/')}"

	def headers(self) -> Dict[str, str]:
		headers = {"Accept": "application/json"}
		if self.api_key:
			headers["apikey"] = self.api_key
			headers["Authorization"] = f"Bearer {self.api_key}"
		return headers

	def build_params(self, criteria: FilterCriteria) -> List[Tuple[str, str]]:
		params: List[Tuple[str, str]] = [("select", "*")]
		for column, value in self.base_filters.items():
			params.append((str(column), f"eq.{value}"))
		for clause in build_clauses(criteria, self.fields):
			if clause.also:
				params.append(("or", _or_param(clause)))
			else:
				params.append((clause.column, _clause_param(clause)))
		if self.order_by:
			column, descending = self.order_by
			params.append(("order", f"{column}.{'desc' if descending else 'asc'}"))
		return params

	# ------------------------------------------------------------------ Blocking part (worker thread)

	def _request(self, params: List[Tuple[str, str]], collection: str) -> List[RecordRow]:
		url = self.collection_url(collection)
		if not url:
			raise ProviderError("REST backend is not configured (missing base_url)")

		headers = self.headers()
		self._log.info(
			f"[_request] - http_request - url={url} params={params} headers={_redact_for_log(headers)} "
			f"timeout_s={self.timeout_s} verify_ssl={self.verify_ssl}"
		)

		with log_timing("RestDataProvider._request", collection=collection):
			try:
				resp = self._http.session().get(
					url,
					params=params,
					headers=headers,
					timeout=self.timeout_s,
					verify=self.verify_ssl,
				)
			except requests.RequestException as exc:
				raise ProviderError(f"Request to {collection} failed: {exc}") from exc

		status = int(resp.status_code)
		if not 200 <= status < 300:
			raise ProviderError(_error_message(resp, collection), status=status)

		try:
			payload = resp.json()
		except ValueError as exc:
			raise ProviderError(f"Invalid JSON from {collection}", status=status) from exc

		if not isinstance(payload, list):
			raise ProviderError(f"Unexpected response shape from {collection}", status=status)

		rows = [r for r in payload if isinstance(r, dict)]
		self._log.debug(f"[_request] - http_response - status={status} rows={len(rows)}")
		return rows


def _clause_param(clause: Clause) -> str:
	if clause.op == MatchOp.ILIKE:
		return f"ilike.*{clause.value}*"
	return f"{clause.op.value}.{clause.value}"


def _or_param(clause: Clause) -> str:
	return "(" + ",".join(f"{col}.{_clause_param(clause)}" for col in clause.columns) + ")"


def _error_message(resp: requests.Response, collection: str) -> str:
	try:
		body = resp.json()
	except ValueError:
		body = None
	if isinstance(body, dict):
		detail = body.get("message") or body.get("error") or body.get("hint")
		if detail:
			return f"Query on {collection} failed: {detail}"
	return f"Query on {collection} failed"


def _redact_for_log(value: Any) -> Any:
	if isinstance(value, dict):
		return {
			k: "***REDACTED***" if str(k).lower() in SENSITIVE_KEYS else _redact_for_log(v)
			for k, v in value.items()
		}
	if isinstance(value, list):
		return [_redact_for_log(v) for v in value]
	return value
