from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, asdict
from typing import Any, Callable

from loguru import logger

from services.bridge_provider import BridgeDataProvider
from services.data_provider import DataProvider
from services.demo_data import demo_rows
from services.list_controller import SearchListController
from services.rest_provider import RestDataProvider
from services.screens import ScreenSpec, get_screen

# --------------------------------------------------------------------------------------
# Config location
# --------------------------------------------------------------------------------------

# APP_CONFIG_PATH overrides the default location (useful for production/testing).
DEFAULT_CONFIG_PATH = "config/app_config.json"

BACKEND_BRIDGE = "bridge"
BACKEND_REST = "rest"
BACKEND_KINDS = (BACKEND_BRIDGE, BACKEND_REST)


def get_config_path() -> str:
    return os.environ.get("APP_CONFIG_PATH") or DEFAULT_CONFIG_PATH


# ------------------------------------------------------------------ Config models

@dataclass
class RestBackendConfig:
    base_url: str = ""
    api_key: str = ""
    timeout_s: float = 10.0
    verify_ssl: bool = True
    # fixed filters added to every query, e.g. {"user_id": "<uuid>"}
    base_filters: dict[str, str] = field(default_factory=dict)


@dataclass
class BridgeBackendConfig:
    data_dir: str = "data"
    seed_demo_data: bool = True


@dataclass
class BackendConfig:
    kind: str = BACKEND_BRIDGE
    rest: RestBackendConfig = field(default_factory=RestBackendConfig)
    bridge: BridgeBackendConfig = field(default_factory=BridgeBackendConfig)


@dataclass
class UiConfig:
    title: str = "Pharmacy Desk"
    business_name: str = ""
    main_route: str = "home"
    visible_routes: list[str] = field(
        default_factory=lambda: [
            "home", "inventory", "bills", "distributors", "purchase_orders",
            "receive_orders", "issue_orders", "customers",
        ]
    )
    dark_mode: bool = False
    hide_nav_on_startup: bool = False


@dataclass
class ScreenConfig:
    page_size: int | None = None


@dataclass
class AppConfig:
    backend: BackendConfig = field(default_factory=BackendConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    screens: dict[str, ScreenConfig] = field(default_factory=dict)


_APP_CONFIG: AppConfig | None = None


def clear_app_config_cache() -> None:
    global _APP_CONFIG
    _APP_CONFIG = None


def get_app_config() -> AppConfig:
    global _APP_CONFIG
    if _APP_CONFIG is None:
        _APP_CONFIG = load_app_config()
    return _APP_CONFIG


def load_app_config(path: str | None = None) -> AppConfig:
    config_path = path or get_config_path()
    log = logger.bind(component="AppConfig", path=config_path)

    if not os.path.exists(config_path):
        log.warning(f"[load_app_config] - config_missing_writing_defaults - path={config_path}")
        cfg = AppConfig()
        save_app_config(cfg, config_path)
        return cfg

    with open(config_path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    cfg = _from_dict(raw)
    log.info(f"[load_app_config] - config_loaded - backend={cfg.backend.kind}")
    return cfg


def save_app_config(cfg: AppConfig, path: str | None = None) -> None:
    global _APP_CONFIG
    config_path = path or get_config_path()
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(_to_dict(cfg), f, indent=2, sort_keys=True)

    # Keep cache in sync
    _APP_CONFIG = cfg


def _to_dict(cfg: AppConfig) -> dict[str, Any]:
    return asdict(cfg)


# ------------------------------------------------------------------ Parsing

def _from_dict(data: dict[str, Any]) -> AppConfig:
    backend_raw = data.get("backend", {}) or {}
    kind = str(backend_raw.get("kind", BACKEND_BRIDGE) or BACKEND_BRIDGE).strip().lower()
    backend = BackendConfig(
        kind=kind,
        rest=RestBackendConfig(**(backend_raw.get("rest", {}) or {})),
        bridge=BridgeBackendConfig(**(backend_raw.get("bridge", {}) or {})),
    )

    ui_raw = data.get("ui", {}) or {}
    defaults = UiConfig()
    ui_cfg = UiConfig(
        title=str(ui_raw.get("title", defaults.title)),
        business_name=str(ui_raw.get("business_name", defaults.business_name)),
        main_route=str(ui_raw.get("main_route", defaults.main_route)),
        visible_routes=list(ui_raw.get("visible_routes", defaults.visible_routes)),
        dark_mode=bool(ui_raw.get("dark_mode", False)),
        hide_nav_on_startup=bool(ui_raw.get("hide_nav_on_startup", False)),
    )

    screens: dict[str, ScreenConfig] = {}
    for key, entry in (data.get("screens", {}) or {}).items():
        if not isinstance(entry, dict):
            continue
        page_size = entry.get("page_size")
        screens[str(key)] = ScreenConfig(page_size=int(page_size) if page_size else None)

    return AppConfig(backend=backend, ui=ui_cfg, screens=screens)


def resolve_rest_endpoint(rest: RestBackendConfig) -> tuple[str, str]:
    """(base_url, api_key) with SUPABASE_URL / SUPABASE_KEY filling empty fields."""
    base_url = rest.base_url
    if not base_url and os.environ.get("SUPABASE_URL"):
        base_url = os.environ["SUPABASE_URL"].rstrip("/") + "/rest/v1"
    api_key = rest.api_key or os.environ.get("SUPABASE_KEY", "")
    return base_url, api_key


# ------------------------------------------------------------------ Helpers

def get_screen_spec(cfg: AppConfig, key: str) -> ScreenSpec:
    screen = get_screen(key)
    override = cfg.screens.get(key)
    return screen.with_page_size(override.page_size if override else None)


def build_provider(cfg: AppConfig, screen: ScreenSpec) -> DataProvider:
    kind = cfg.backend.kind
    if kind == BACKEND_REST:
        rest = cfg.backend.rest
        base_url, api_key = resolve_rest_endpoint(rest)
        return RestDataProvider(
            base_url,
            screen.collection,
            screen.filters,
            api_key=api_key,
            order_by=screen.order_by,
            base_filters=rest.base_filters,
            timeout_s=rest.timeout_s,
            verify_ssl=rest.verify_ssl,
        )
    if kind == BACKEND_BRIDGE:
        bridge = cfg.backend.bridge
        return BridgeDataProvider(
            bridge.data_dir,
            screen.collection,
            screen.filters,
            order_by=screen.order_by,
            seed=demo_rows if bridge.seed_demo_data else None,
        )
    raise ValueError(f"Unknown backend kind {kind!r}, expected one of {BACKEND_KINDS}")


def build_controller(
    cfg: AppConfig,
    key: str,
    *,
    notify: Callable[[str], None] | None = None,
    provider: DataProvider | None = None,
) -> SearchListController:
    screen = get_screen_spec(cfg, key)
    return SearchListController(
        provider or build_provider(cfg, screen),
        filter_fields=screen.filter_names,
        page_size=screen.page_size,
        text_filter_fields=screen.text_filter_fields,
        id_fields=screen.id_fields,
        title=screen.key.replace("_", " "),
        notify=notify,
        require_criteria=screen.require_criteria,
        missing_criteria_message=screen.missing_criteria_message,
    )
