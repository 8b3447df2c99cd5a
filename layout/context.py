from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Callable
from nicegui import ui

from services.list_controller import SearchListController


@dataclass
class PageContext:
	# -----------------------------
	# Layout UI references
	# -----------------------------

	# Left navigation drawer (header toggles it)
	drawer: Optional[ui.left_drawer] = None

	# Container holding the navigation buttons
	drawer_content: Optional[ui.element] = None

	# Breadcrumb label, e.g. "/inventory"
	breadcrumb: Optional[ui.label] = None

	# Container the router clears and renders the active page into
	main_area: Optional[ui.column] = None

	# Drawer buttons by route key, used to highlight the active route
	nav_buttons: dict[str, ui.button] = field(default_factory=dict)

	# -----------------------------
	# Per-tab list state
	# -----------------------------

	# One controller per search screen, created on first visit so results,
	# filters and the current page survive navigation between screens.
	controllers: dict[str, SearchListController] = field(default_factory=dict)

	# Called by the router before the next page is rendered
	page_cleanup: Optional[Callable[[], None]] = None

	# Last popup event id already shown as a toast in this tab
	last_error_event_id: int = 0

	def controller(self, key: str, factory: Callable[[], SearchListController]) -> SearchListController:
		ctrl = self.controllers.get(key)
		if ctrl is None:
			ctrl = factory()
			self.controllers[key] = ctrl
		return ctrl
