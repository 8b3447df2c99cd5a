from nicegui import ui, app
from layout.app_style import nav_button_props
from layout.context import PageContext
from layout.router import get_visible_routes, navigate, Route
from services.app_config import get_app_config


@ui.refreshable
def _render_drawer_content(ctx: PageContext) -> None:
	"""Rebuild the drawer buttons from current visible routes."""
	ctx.nav_buttons.clear()
	active_key = app.storage.user.get("current_route", "")
	is_dark = bool(get_app_config().ui.dark_mode)

	for key, route in get_visible_routes().items():
		btn = _add_nav_button(ctx, route, key)
		btn.props(remove="flat").props(nav_button_props(key == active_key, is_dark))


def build_drawer(ctx: PageContext) -> ui.left_drawer:
	ui_cfg = get_app_config().ui
	drawer_classes = "bg-slate-900 text-gray-100" if ui_cfg.dark_mode else "bg-gray-50"
	drawer = ui.left_drawer(value=not ui_cfg.hide_nav_on_startup, bordered=True) \
		.props("width=220").classes(drawer_classes)
	ctx.drawer = drawer

	with drawer:
		ctx.drawer_content = ui.column().classes("w-full")
		with ctx.drawer_content:
			_render_drawer_content(ctx)

	return drawer


def _add_nav_button(ctx: PageContext, route: Route, key: str) -> ui.button:
	btn = ui.button(
		route.label,
		icon=route.icon,
		on_click=lambda k=key: navigate(ctx, k),
	).props("flat no-caps").classes("w-full justify-start px-4")
	ctx.nav_buttons[key] = btn
	return btn
