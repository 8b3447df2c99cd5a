from __future__ import annotations

import logging
import os
import sys
import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Any

from loguru import logger


LOG_FORMAT = (
	"<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
	"[<level>{level:<8}</level>] | "
	"<cyan>{extra[component]:<22}</cyan> | "
	"<white>{name}.{function}:{line}</white> | "
	"<level>{message}</level>"
)

DEFAULT_CONSOLE_LEVEL = "INFO"
DEFAULT_FILE_LEVEL = "DEBUG"
_LEVEL_NAMES = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

_POPUP_EVENTS_MAX = 200
_popup_lock = threading.Lock()
_popup_events: deque[dict[str, Any]] = deque(maxlen=_POPUP_EVENTS_MAX)
_popup_event_id = 0


def _popup_sink(message) -> None:
	"""Keep ERROR+ records in memory so open browser tabs can toast them."""
	global _popup_event_id
	record = message.record
	text = str(record.get("message") or "").strip()

	exc = record.get("exception")
	if exc and getattr(exc, "value", None):
		exc_text = str(exc.value)
		if exc_text:
			text = f"{text} | {exc_text}" if text else exc_text

	with _popup_lock:
		_popup_event_id += 1
		_popup_events.append(
			{
				"id": _popup_event_id,
				"level": str(record.get("level").name),
				"message": text or "An unknown error was logged.",
			}
		)


def get_latest_error_popup_event_id() -> int:
	with _popup_lock:
		return _popup_event_id


def get_error_popup_events_since(last_seen_id: int) -> tuple[int, list[dict[str, Any]]]:
	with _popup_lock:
		events = [evt for evt in _popup_events if int(evt["id"]) > int(last_seen_id)]
		return _popup_event_id, events


def _install_exception_hooks() -> None:
	def _sys_hook(exc_type, exc_value, exc_tb):
		logger.opt(exception=(exc_type, exc_value, exc_tb)).critical("[_sys_hook] - uncaught_exception")

	def _thread_hook(args):
		thread_name = getattr(args.thread, "name", "unknown")
		logger.opt(exception=(args.exc_type, args.exc_value, args.exc_traceback)).critical(
			f"[_thread_hook] - uncaught_thread_exception - thread={thread_name}"
		)

	sys.excepthook = _sys_hook
	threading.excepthook = _thread_hook


def parse_level(level_value: Any, default: str = DEFAULT_CONSOLE_LEVEL) -> str:
	"""Accepts logging-style ints or level names and returns a loguru level name."""
	if isinstance(level_value, int):
		return logging.getLevelName(level_value) if level_value in (
			logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG
		) else default

	if isinstance(level_value, str):
		val = level_value.strip().upper()
		if val in _LEVEL_NAMES:
			return val

	return default


def setup_logging(
	app_name: str = "pharmacy_desk",
	log_dir: str = "log",
	log_level: str | int | None = None,
	file_level: str | int | None = None,
) -> str:
	"""
	Configure loguru sinks and return the log file path.

	- colored console sink
	- rotating file sink (10 MB, zip compressed, 50 files kept)
	- in-memory ERROR sink consumed by the UI toast poller
	"""
	console_level = parse_level(log_level if log_level is not None else os.getenv("LOG_LEVEL"))
	resolved_file_level = parse_level(
		file_level if file_level is not None else os.getenv("LOG_FILE_LEVEL"),
		default=DEFAULT_FILE_LEVEL,
	)

	os.makedirs(log_dir, exist_ok=True)
	log_path = os.path.join(log_dir, f"{app_name}.log")

	logger.remove()
	logger.configure(
		extra={"component": "app"},
		handlers=[
			{
				"sink": sys.stdout,
				"format": LOG_FORMAT,
				"colorize": True,
				"level": console_level,
			},
			{
				"sink": log_path,
				"format": LOG_FORMAT,
				"rotation": "10 MB",
				"compression": "zip",
				"retention": 50,
				"colorize": False,
				"level": resolved_file_level,
			},
		],
	)
	logger.add(_popup_sink, level="ERROR", catch=True, enqueue=True, format="{message}")
	_install_exception_hooks()

	logger.info(
		f"[setup_logging] - logger_initialized - app_name={app_name} console_level={console_level} "
		f"file_level={resolved_file_level} log_path={log_path}"
	)
	return log_path


def summarize_for_log(payload: Any, *, max_items: int = 10, max_text: int = 140) -> Any:
	if payload is None:
		return None
	if isinstance(payload, dict):
		items = list(payload.items())[:max_items]
		return {str(k): summarize_for_log(v, max_items=max_items, max_text=max_text) for k, v in items}
	if isinstance(payload, (list, tuple, set)):
		limited = list(payload)[:max_items]
		return [summarize_for_log(v, max_items=max_items, max_text=max_text) for v in limited]
	text = str(payload)
	if len(text) > max_text:
		return f"{text[:max_text]}...({len(text)} chars)"
	return text


@contextmanager
def log_timing(method_name: str, **context: Any):
	start = time.perf_counter()
	context_txt = " ".join(f"{k}={summarize_for_log(v)}" for k, v in context.items())
	logger.debug(f"[{method_name}] - start {context_txt}".strip())
	try:
		yield
	except Exception:
		duration_ms = round((time.perf_counter() - start) * 1000, 2)
		logger.debug(f"[{method_name}] - failed - duration_ms={duration_ms} {context_txt}".strip())
		raise
	duration_ms = round((time.perf_counter() - start) * 1000, 2)
	logger.debug(f"[{method_name}] - end - duration_ms={duration_ms} {context_txt}".strip())
