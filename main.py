import os
from nicegui import ui, app

from layout.context import PageContext
from layout.main_area import build_main_area
from layout.router import navigate, get_initial_route_from_url
from layout.header import build_header
from layout.drawer import build_drawer

from services.app_config import get_app_config
from services.logging_setup import setup_logging, get_error_popup_events_since, get_latest_error_popup_event_id
from loguru import logger


# ------------------------------------------------------------------
# GLOBAL SETUP (PROCESS LIFETIME)
# ------------------------------------------------------------------

setup_logging(app_name="pharmacy_desk")
logger.info("Starting NiceGUI")

APP_CONFIG = get_app_config()


# ------------------------------------------------------------------
# UI
# ------------------------------------------------------------------

HEADER_PX = 64


@ui.page("/")
def index():
	ui.colors(primary="#0f766e")
	cfg = get_app_config()
	ui.dark_mode(cfg.ui.dark_mode)

	ui.add_head_html("""
	<style>
		html, body { height: 100%; margin: 0; overflow: hidden; }
		.app-muted { opacity: 0.7; }
	</style>
	""")

	# --------- PER SESSION CONTEXT ---------
	ctx = PageContext()
	ctx.last_error_event_id = get_latest_error_popup_event_id()

	def _show_error_toasts() -> None:
		latest_id, events = get_error_popup_events_since(ctx.last_error_event_id)
		ctx.last_error_event_id = latest_id
		for event in events:
			ui.notify(event["message"], type="negative")

	ui.timer(1.0, _show_error_toasts)

	# --------- LAYOUT ---------
	build_header(ctx)
	build_drawer(ctx)

	with ui.row().classes("w-full").style(f"height: calc(100vh - {HEADER_PX}px);"):
		with ui.column().classes("w-full h-full min-h-0 min-w-0 overflow-hidden p-4 pb-6 gap-4"):
			build_main_area(ctx)

	default_route = app.storage.user.get("current_route", cfg.ui.main_route)
	initial = get_initial_route_from_url(default_route)
	navigate(ctx, initial)


ui.run(
	title=APP_CONFIG.ui.title,
	reload=False,
	storage_secret=os.environ.get("NICEGUI_STORAGE_SECRET", "pharmacy-desk-dev"),
)
