# pages/home.py
from nicegui import ui
from layout.app_style import button_props, panel_classes
from layout.context import PageContext
from layout.page_scaffold import build_page
from services.app_config import get_app_config
from services.i18n import t
from services.screens import SCREENS


def render(container: ui.element, ctx: PageContext) -> None:
    # router imports this module, so navigate is resolved at call time
    from layout.router import is_route_visible, navigate

    cfg = get_app_config()

    def build_content(_parent: ui.element) -> None:
        if cfg.ui.business_name:
            ui.label(cfg.ui.business_name).classes("text-lg font-semibold")
        ui.label(t("home.instruction", "Pick a list to search.")).classes("app-muted")

        with ui.row().classes("w-full gap-4 flex-wrap"):
            for key, screen in SCREENS.items():
                if not is_route_visible(key):
                    continue
                ctrl = ctx.controllers.get(key)
                with ui.column().classes(panel_classes() + " w-[240px] gap-2"):
                    with ui.row().classes("items-center gap-2"):
                        ui.icon(screen.icon).classes("text-2xl text-primary")
                        ui.label(t(f"nav.{key}", screen.title)).classes("font-semibold")
                    if ctrl is not None and ctrl.has_searched:
                        ui.label(
                            t("home.loaded", "{count} record(s) loaded", count=len(ctrl.result_set))
                        ).classes("text-sm app-muted")
                    ui.button(
                        t("home.open", "Open"),
                        icon="arrow_forward",
                        on_click=lambda k=key: navigate(ctx, k),
                    ).props(button_props("link"))

    build_page(
        container,
        title=t("nav.home", "Dashboard"),
        content=build_content,
    )
