from nicegui import ui
from layout.context import PageContext


def build_main_area(ctx: PageContext) -> None:
	# flex-1 + min-h-0 lets the inner overflow containers scroll
	with ui.column().classes("w-full flex-1 min-h-0 min-w-0 gap-2 overflow-hidden"):
		ctx.breadcrumb = ui.label("").classes("text-xs app-muted")
		ctx.main_area = ui.column().classes("w-full flex-1 min-h-0 min-w-0 gap-4 overflow-hidden")
