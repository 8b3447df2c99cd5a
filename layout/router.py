from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict
from nicegui import ui, app

from layout.app_style import nav_button_props
from layout.context import PageContext
from pages import home
from pages.search_list import render_search_list
from services.app_config import get_app_config
from services.i18n import t
from services.screens import SCREENS


# All pages get (container, ctx)
RenderFn = Callable[[ui.element, PageContext], None]


@dataclass(frozen=True)
class Route:
    label: str
    icon: str
    render: RenderFn


def _screen_renderer(key: str) -> RenderFn:
    def _render(container: ui.element, ctx: PageContext) -> None:
        render_search_list(container, ctx, key)
    return _render


def get_routes() -> Dict[str, Route]:
    routes: Dict[str, Route] = {"home": Route(t("nav.home", "Dashboard"), "dashboard", home.render)}
    for key, screen in SCREENS.items():
        routes[key] = Route(t(f"nav.{key}", screen.title), screen.icon, _screen_renderer(key))
    return routes


def get_visible_routes() -> Dict[str, Route]:
    visible = get_app_config().ui.visible_routes
    routes = get_routes()
    if not visible:
        return routes
    return {key: route for key, route in routes.items() if key in visible}


def is_route_visible(key: str) -> bool:
    return key in get_visible_routes()


def _apply_drawer_highlight(ctx: PageContext, active_key: str) -> None:
    """Update drawer button styles so the active one looks selected."""
    is_dark = bool(get_app_config().ui.dark_mode)
    for key, btn in ctx.nav_buttons.items():
        btn.props(remove="flat unelevated").props(nav_button_props(key == active_key, is_dark))


# supports visiting: http://localhost:8080/?page=bills
def get_initial_route_from_url(default: str = "home") -> str:
    """Read ?page=... from the current request (deep link)."""
    page = ui.context.client.request.query_params.get("page")
    if page and is_route_visible(page):
        return page
    return default if is_route_visible(default) else next(iter(get_visible_routes()), "home")


def navigate(ctx: PageContext, route_key: str) -> None:
    route = get_routes().get(route_key)
    if not route or not is_route_visible(route_key):
        ui.notify(f"Unknown route: {route_key}", type="negative")
        return

    # per-user state (persists if storage_secret stays the same)
    app.storage.user["current_route"] = route_key

    # update the URL (deep-link) without reloading
    ui.run_javascript(f"history.replaceState(null, '', '?page={route_key}')")

    _apply_drawer_highlight(ctx, route_key)

    if ctx.breadcrumb:
        ctx.breadcrumb.set_text(f"/{route_key}")

    if ctx.page_cleanup:
        cleanup, ctx.page_cleanup = ctx.page_cleanup, None
        cleanup()

    if ctx.main_area:
        ctx.main_area.clear()
        route.render(ctx.main_area, ctx)
