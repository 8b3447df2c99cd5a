from datetime import datetime

from nicegui import ui
from loguru import logger

from layout.context import PageContext
from layout.app_style import button_classes, button_props
from services.app_config import get_app_config, save_app_config
from services.i18n import SUPPORTED_LANGUAGES, get_language, set_language, t


def build_header(ctx: PageContext) -> ui.header:
    cfg = get_app_config()
    is_dark = cfg.ui.dark_mode
    header = ui.header().classes("h-16 w-full app-header border-b border-[var(--input-border)]")

    with header:
        with ui.row().classes("h-full items-center w-full px-4 gap-2"):
            ui.button(icon="menu", on_click=lambda: ctx.drawer.toggle() if ctx.drawer else None).props(
                "flat round dense color=white"
            )

            ui.icon("local_pharmacy").classes("text-2xl")
            ui.label(cfg.ui.title or t("app.title", "Pharmacy Desk")).classes("text-lg font-semibold")
            ui.space()

            language_options = {entry["code"]: entry["label"] for entry in SUPPORTED_LANGUAGES}

            def on_language_change(e) -> None:
                logger.info(f"[on_language_change] - user_language_change - selected={e.value}")
                set_language(e.value)
                ui.run_javascript("location.reload()")

            ui.select(
                options=language_options,
                value=get_language(),
                on_change=on_language_change,
            ).props("dense outlined dark").classes("min-w-[140px]")

            def on_toggle_theme() -> None:
                cfg_local = get_app_config()
                current = cfg_local.ui.dark_mode
                cfg_local.ui.dark_mode = not current
                logger.info(f"[on_toggle_theme] - theme_mode_changed - old={current} new={cfg_local.ui.dark_mode}")
                save_app_config(cfg_local)
                ui.run_javascript("location.reload()")

            ui.button(
                "Dark" if is_dark else "Light",
                icon="dark_mode" if is_dark else "light_mode",
                on_click=on_toggle_theme,
            ).props(button_props("neutral") + " text-color=white").classes(button_classes())

            dt_label = ui.label("").classes("ml-2 text-sm")

            def update_time() -> None:
                dt_label.set_text(datetime.now().strftime("%d-%m-%Y %H:%M"))

            update_time()
            ui.timer(60.0, update_time)

    return header
