"""Sprite markup for Pokemon icons."""

import html

from recap.game.schema.pokemon_state import DEFAULT_ICON_ID

ICON_BASE_URL = "https://play.pokemonshowdown.com/sprites/gen5"

IMAGE_RULES = (
    "display:inline-block",
    "vertical-align:middle",
    "width:24px",
    "height:24px",
    "margin-right:4px",
    "image-rendering:pixelated",
)


def icon_url(icon_id: str) -> str:
    """Sprite address for an icon identifier; blank ids use the default icon."""
    resolved = icon_id.strip() if icon_id and icon_id.strip() else DEFAULT_ICON_ID
    return f"{ICON_BASE_URL}/{resolved}.png"


def render_icon(icon_id: str, alt: str) -> str:
    return (
        f'<img src="{icon_url(icon_id)}" alt="{html.escape(alt, quote=True)}" '
        f'width="24" height="24" style="{";".join(IMAGE_RULES)}" />'
    )


def render_icon_label(icon_id: str, name: str) -> str:
    """Icon followed by the escaped name, the markup twin of a plain-text name."""
    return f"{render_icon(icon_id, name)}{html.escape(name, quote=False)}"
