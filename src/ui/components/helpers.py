"""Small display helpers shared by the pages: headers, thumbnails, formatting."""
from datetime import date

from nicegui import ui

from config import CURRENCY_SYMBOL

# Tokens
HOVER_BG = "hover:bg-teal-50"
NAV_ACTIVE_BG = "#CCFBF1"
NAV_ACTIVE_BORDER = "#14B8A6"
NAV_ACTIVE_TEXT = "#0F766E"

# Letter-avatar backgrounds, picked by the product name's first letter
AVATAR_COLORS = [
    "#0EA5E9", "#14B8A6", "#22C55E", "#84CC16", "#EAB308",
    "#F97316", "#EF4444", "#EC4899", "#A855F7", "#6366F1",
]


def page_header(title: str, subtitle: str | None = None, icon: str | None = None):
    """Title row for a page, with an optional leading icon and a subtitle line."""
    with ui.column().classes("gap-0"):
        with ui.row().classes("items-center gap-2"):
            if icon:
                ui.icon(icon, size="sm").classes("text-primary")
            ui.label(title).classes("text-h5 font-bold")
        if subtitle:
            ui.label(subtitle).classes("text-body2 text-secondary")


def section_header(title: str, icon: str | None = None, subtitle: str | None = None):
    with ui.column().classes("gap-0 mb-2"):
        with ui.row().classes("items-center gap-2"):
            if icon:
                ui.icon(icon).classes("text-accent")
            ui.label(title).classes("text-subtitle1 font-bold")
        if subtitle:
            ui.label(subtitle).classes("text-caption text-secondary")


def avatar_color(name: str) -> str:
    if not name:
        return AVATAR_COLORS[0]
    return AVATAR_COLORS[ord(name[0].upper()) % len(AVATAR_COLORS)]


def product_thumbnail(name: str, image: str | None, size: int = 48) -> None:
    """Product image, or a coloured initial when the product has none."""
    if image:
        ui.image(image).classes("rounded object-cover").style(
            f"width: {size}px; height: {size}px; flex-shrink: 0"
        )
        return
    ui.avatar(
        (name or "?")[0].upper(), color=avatar_color(name), text_color="white",
        size=f"{size}px", font_size=f"{size // 3}px", square=True,
    ).classes("rounded")


def format_price(price: float | None, na_text: str = "-") -> str:
    if price is None:
        return na_text
    return f"{CURRENCY_SYMBOL}{price:,.2f}"


def format_date(value: date | None, long: bool = False, na_text: str = "-") -> str:
    """US-style date, e.g. ``10/17/2026`` or ``October 17, 2026``."""
    if value is None:
        return na_text
    if long:
        return f"{value.strftime('%B')} {value.day}, {value.year}"
    return f"{value.month}/{value.day}/{value.year}"
