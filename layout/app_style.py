from __future__ import annotations


BUTTON_VARIANTS: dict[str, str] = {
    "primary": "color=primary text-color=white unelevated no-caps",
    "danger": "color=negative text-color=white unelevated no-caps",
    "neutral": "outline color=secondary no-caps",
    "link": "flat color=primary no-caps",
}


def button_props(variant: str = "primary") -> str:
    return BUTTON_VARIANTS.get(variant, BUTTON_VARIANTS["primary"])


def button_classes(full: bool = False) -> str:
    base = "app-btn h-[40px] px-4 rounded-xl font-semibold"
    return f"{base} w-full" if full else base


def panel_classes(padded: bool = True) -> str:
    base = "app-panel w-full rounded-lg border border-[var(--input-border)]"
    return f"{base} p-4" if padded else base


def section_title_classes() -> str:
    return "text-base font-semibold"


def nav_button_props(active: bool, dark: bool = False) -> str:
    if active:
        return "unelevated color=primary"
    return f"flat color={'grey-3' if dark else 'grey-8'}"
