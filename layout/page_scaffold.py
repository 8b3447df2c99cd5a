from __future__ import annotations

from typing import Callable, Literal
from nicegui import ui


ContentBuilder = Callable[[ui.element], None]
ScrollMode = Literal["scaffold", "none"]


def build_page(
	container: ui.element,
	*,
	title: str | None = None,
	breadcrumbs: list[str] | None = None,
	content: ContentBuilder,
	content_padding_classes: str = "",
	scroll_mode: ScrollMode = "scaffold",
) -> None:
	"""
	Standard page layout:

	- Fills available height (h-full + min-h-0)
	- Optional title and breadcrumb trail
	- scroll_mode="scaffold": the content area scrolls
	- scroll_mode="none": the page content manages its own scrolling
	"""
	overflow = "overflow-auto" if scroll_mode == "scaffold" else "overflow-hidden"

	with container:
		with ui.column().classes("w-full h-full min-h-0 min-w-0"):
			if breadcrumbs:
				ui.label(" / ".join(breadcrumbs)).classes("text-xs app-muted")
			if title:
				ui.label(title).classes("text-2xl font-bold")

			with ui.column().classes(
				"w-full flex-1 min-h-0 min-w-0 %s %s" % (overflow, content_padding_classes or "")
			) as content_area:
				content(content_area)
