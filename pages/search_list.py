from __future__ import annotations

import json
from datetime import date
from typing import Any

from nicegui import ui
from loguru import logger

from layout.app_style import button_classes, button_props, panel_classes, section_title_classes
from layout.context import PageContext
from layout.page_scaffold import build_page
from services.app_config import build_controller, get_app_config, get_screen_spec
from services.data_provider import FieldKind, FilterField
from services.i18n import t
from services.list_controller import SearchListController
from services.pagination import page_numbers
from services.printing import render_print_html
from services.record_detail import RecordDetail, SectionRows, load_record_detail
from services.record_fields import format_money, row_key
from services.screens import ScreenSpec


_ACTIONS_SLOT = r'''
<q-td :props="props">
	<q-btn flat dense no-caps color="primary" :label="props.value" @click="$parent.$emit('view', props.row)" />
</q-td>
'''


def render_search_list(container: ui.element, ctx: PageContext, key: str) -> None:
	cfg = get_app_config()
	screen = get_screen_spec(cfg, key)
	ctrl = ctx.controller(
		key,
		lambda: build_controller(cfg, key, notify=lambda msg: ui.notify(msg, type="negative")),
	)

	def build_content(_parent: ui.element) -> None:
		_build_filter_panel(screen, ctrl)
		_build_results(screen, ctrl, ctx, business_name=cfg.ui.business_name)

	build_page(
		container,
		title=t(f"nav.{key}", screen.title),
		breadcrumbs=[screen.title, "Results"],
		content=build_content,
	)


# ---------------------------------------------------------------------
# Filter panel
# ---------------------------------------------------------------------

def _build_filter_panel(screen: ScreenSpec, ctrl: SearchListController) -> None:
	@ui.refreshable
	def filter_inputs() -> None:
		with ui.row().classes("w-full items-end gap-4"):
			for f in screen.filters:
				if f.kind == FieldKind.DATE:
					_date_input(f, ctrl)
				else:
					ui.input(
						label=f.label or f.name,
						value=str(ctrl.criteria.get(f.name) or ""),
						on_change=lambda e, name=f.name: ctrl.update_filter(name, e.value),
					).props("dense outlined clearable").classes("w-[220px]") \
						.on("keydown.enter", on_search)

	async def on_search() -> None:
		await ctrl.search()

	async def on_get_all() -> None:
		await ctrl.fetch_all()

	def on_reset() -> None:
		ctrl.reset()
		filter_inputs.refresh()

	with ui.column().classes(panel_classes()):
		filter_inputs()
		with ui.row().classes("w-full items-center gap-3 mt-2"):
			ui.button(t("common.get_all", "GET ALL"), on_click=on_get_all).props(button_props("link"))
			ui.button(t("common.search", "Search"), icon="search", on_click=on_search) \
				.props(button_props("primary")).classes(button_classes())
			ui.button(t("common.reset", "Reset"), on_click=on_reset) \
				.props(button_props("neutral")).classes(button_classes())
			ui.spinner(size="md").bind_visibility_from(ctrl, "busy")


def _date_input(f: FilterField, ctrl: SearchListController) -> None:
	current = ctrl.criteria.get(f.name)
	text = current.strftime("%d-%m-%Y") if isinstance(current, date) else ""

	date_input = ui.input(label=f.label or f.name, value=text, placeholder="DD-MM-YYYY") \
		.props("dense outlined readonly").classes("w-[180px]")

	def on_date_change(e) -> None:
		value = e.value or None
		picked = date.fromisoformat(value) if value else None
		ctrl.update_filter(f.name, picked)
		date_input.value = picked.strftime("%d-%m-%Y") if picked else ""

	with date_input.add_slot("append"):
		ui.icon("event").classes("cursor-pointer").on("click", lambda: menu.open())
		ui.icon("close").classes("cursor-pointer").on("click", lambda: picker.set_value(None))
		with ui.menu() as menu:
			picker = ui.date(
				value=current.isoformat() if isinstance(current, date) else None,
				on_change=on_date_change,
			).props("minimal")


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------

def _table_columns(screen: ScreenSpec) -> list[dict[str, Any]]:
	cols = [
		{"name": c.name, "label": c.label.upper(), "field": c.name, "align": "left"}
		for c in screen.columns
	]
	cols.append({"name": "actions", "label": "", "field": "actions", "align": "right"})
	return cols


def _table_rows(screen: ScreenSpec, ctrl: SearchListController) -> list[dict[str, Any]]:
	rows = []
	for row in ctrl.visible_rows:
		display = {c.name: c.display(row) for c in screen.columns}
		display["_key"] = ctrl.row_key(row)
		display["actions"] = t("common.view_details", "VIEW DETAILS")
		rows.append(display)
	return rows


def sync_text_input(element: Any, value: str) -> bool:
	"""Push the controller value into an input that no longer shows it."""
	if (element.value or "") == value:
		return False
	element.set_value(value)
	return True


def _build_results(screen: ScreenSpec, ctrl: SearchListController, ctx: PageContext, *, business_name: str) -> None:
	with ui.dialog() as detail_dialog, ui.card().classes("w-[760px] max-w-[95vw]"):
		detail_body = ui.column().classes("w-full gap-2")
	detail_dialog.on("hide", lambda _=None: ctrl.clear_selection())

	async def open_details(args: Any) -> None:
		clicked_key = args.get("_key") if isinstance(args, dict) else None
		by_key = {ctrl.row_key(r): r for r in ctrl.visible_rows}
		row = by_key.get(clicked_key)
		if row is None:
			logger.warning(f"[open_details] - row_not_visible - key={clicked_key}")
			return
		ctrl.select_record(row)
		detail_body.clear()
		with detail_body:
			ui.spinner(size="lg").classes("self-center my-8")
		detail_dialog.open()
		detail = await load_record_detail(ctrl.provider, screen, row)
		if ctrl.selected_record is not row:
			return
		_fill_detail(detail_body, screen, detail, on_close=detail_dialog.close, business_name=business_name)

	with ui.column().classes(panel_classes(padded=False)):
		with ui.row().classes("w-full items-center px-4 py-3 border-b"):
			ui.label("Details").classes(section_title_classes())
			ui.space()
			local_filter = ui.input(
				label=screen.text_filter_label,
				value=ctrl.local_text_filter,
				on_change=lambda e: ctrl.set_local_text_filter(e.value or ""),
			).props("dense outlined clearable").classes("w-[240px]")

		@ui.refreshable
		def results() -> None:
			if not ctrl.has_searched:
				ui.label(t("list.prompt", "Use the filters above and press Search.")) \
					.classes("w-full text-center py-12 app-muted")
				return
			info = ctrl.page_info
			if info.total_count == 0:
				if ctrl.busy:
					ui.label(t("common.loading", "Loading ...")).classes("w-full text-center py-12 app-muted")
				else:
					ui.label(screen.empty_message).classes("w-full text-center py-12 app-muted")
				return

			table = ui.table(columns=_table_columns(screen), rows=_table_rows(screen, ctrl), row_key="_key") \
				.classes("w-full text-sm").props("flat dense separator=horizontal hide-pagination")
			table.add_slot("body-cell-actions", _ACTIONS_SLOT)
			table.on("view", lambda e: open_details(e.args))

			_pager(ctrl, info.current_page, info.total_pages)
			ui.label(f"{info.total_count} record(s)").classes("text-xs app-muted px-4 pb-2")

		results()

	def on_state_change() -> None:
		sync_text_input(local_filter, ctrl.local_text_filter)
		results.refresh()

	ctx.page_cleanup = ctrl.on_change(on_state_change)


def _pager(ctrl: SearchListController, current: int, total: int) -> None:
	if total <= 1:
		return
	with ui.row().classes("w-full justify-center items-center gap-1 py-3"):
		ui.button(t("common.previous", "Previous"), icon="chevron_left",
				  on_click=lambda: ctrl.go_to_page(current - 1)) \
			.props("outline dense no-caps").set_enabled(current > 1)
		for page in page_numbers(current, total):
			if page is None:
				ui.button("...").props("outline dense disable").classes("min-w-[40px]")
				continue
			btn = ui.button(str(page), on_click=lambda p=page: ctrl.go_to_page(p)).classes("min-w-[40px]")
			btn.props("unelevated color=primary dense" if page == current else "outline dense")
		ui.button(t("common.next", "Next"), icon_right="chevron_right",
				  on_click=lambda: ctrl.go_to_page(current + 1)) \
			.props("outline dense no-caps").set_enabled(current < total)


# ---------------------------------------------------------------------
# Detail dialog
# ---------------------------------------------------------------------

def _fill_detail(body: ui.column, screen: ScreenSpec, detail: RecordDetail, *, on_close, business_name: str) -> None:
	row = detail.row
	body.clear()
	with body:
		ui.label(f"# {row_key(row, screen.id_fields)}").classes("text-xl font-semibold")
		with ui.element("div").classes("w-full grid grid-cols-3 gap-4 border rounded-lg p-4"):
			for col in screen.detail_fields:
				with ui.column().classes("gap-1"):
					ui.label(col.label).classes("text-sm app-muted")
					ui.label(col.display(row)).classes("bg-gray-100 rounded-lg px-4 py-3 text-sm w-full")

		for part in detail.sections:
			_detail_section(part)

		def on_print() -> None:
			document = render_print_html(screen, row, business_name=business_name, detail=detail)
			logger.info(f"[on_print] - print_requested - screen={screen.key} record={row_key(row, screen.id_fields)}")
			ui.run_javascript(
				"const w = window.open('', '_blank');"
				f"w.document.write({json.dumps(document)});"
				"w.document.close(); w.focus(); w.print();"
			)

		with ui.row().classes("w-full justify-end gap-2 mt-2"):
			ui.button(t("common.close", "Close"), on_click=on_close).props(button_props("neutral"))
			ui.button(t("common.print", "Print"), icon="print", on_click=on_print).props(button_props("primary"))


def _detail_section(part: SectionRows) -> None:
	section = part.section
	ui.label(section.title).classes(section_title_classes() + " mt-2")
	if part.error:
		ui.label(part.error).classes("text-sm text-negative")
	if not part.rows:
		ui.label(section.empty_message).classes("w-full text-center py-4 app-muted border rounded-lg")
	else:
		columns = [{"name": c.name, "label": c.label, "field": c.name, "align": "left"} for c in section.columns]
		rows = [{c.name: c.display(r) for c in section.columns} for r in part.rows]
		ui.table(columns=columns, rows=rows, pagination=0).classes("w-full text-sm") \
			.props("flat bordered dense hide-pagination")
	if part.total is not None:
		ui.label(f"Total: {format_money(part.total)}").classes("self-end font-semibold")
