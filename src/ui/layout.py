"""Page chrome: header with product search, navigation drawer, content column."""
from urllib.parse import quote

from nicegui import ui

from config import APP_TITLE
from src.ui.components.helpers import HOVER_BG, NAV_ACTIVE_BG, NAV_ACTIVE_BORDER, NAV_ACTIVE_TEXT

NAV_ITEMS = [
    ("Products", "inventory_2", "/products"),
    ("Reports", "assessment", "/reports"),
]


def build_layout(active: str = "/products", title: str = APP_TITLE):
    """Build header and drawer, return the column pages render into.

    *active* is the path of the navigation entry to highlight.
    """
    ui.colors(
        primary="#0F766E",
        secondary="#5f6368",
        accent="#14B8A6",
        positive="#34a853",
        negative="#ea4335",
        warning="#F59E0B",
    )

    with ui.header().classes("items-center px-4 gap-4 bg-primary"):
        ui.icon("local_pharmacy", size="md").classes("text-white")
        ui.label(title).classes("text-subtitle1 text-white font-medium")
        ui.space()

        quick_search = ui.input(placeholder="Find a product...").props(
            "dark dense borderless clearable input-class='text-white'"
        ).classes("w-72 px-2 rounded bg-white/10")

        def _go_to_search(_=None):
            term = (quick_search.value or "").strip()
            if term:
                ui.navigate.to(f"/products?search={quote(term)}")

        quick_search.on("keydown.enter", _go_to_search)

    with ui.left_drawer(value=True).props("width=220 bordered").classes("bg-grey-1 pt-3"):
        for label, icon, path in NAV_ITEMS:
            _nav_link(label, icon, path, selected=active.startswith(path))

    return ui.column().classes("w-full p-6 max-w-7xl mx-auto gap-4")


def _nav_link(label: str, icon: str, path: str, selected: bool = False):
    style = (
        f"background: {NAV_ACTIVE_BG}; border-left: 3px solid {NAV_ACTIVE_BORDER}; "
        f"color: {NAV_ACTIVE_TEXT}; font-weight: 600"
        if selected else ""
    )
    with ui.link(target=path).classes("no-underline w-full text-secondary"):
        with ui.row().classes(f"items-center gap-3 px-4 py-2 w-full {HOVER_BG}").style(style):
            ui.icon(icon)
            ui.label(label).classes("text-body1")
