# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Color constants and the rich `Theme` used by Bindery's consoles.

Colors are plain hex strings so they can be embedded directly in rich markup,
e.g. `f"[{OneColors.DARK_RED}]error[/]"`.
"""
from rich.theme import Theme


class OneColors:
    """One Dark inspired palette."""

    DARK_RED = "#BE5046"
    LIGHT_YELLOW = "#E5C07B"
    GREEN = "#98C379"
    CYAN = "#56B6C2"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"


def get_bindery_theme() -> Theme:
    """Named styles used when rendering usage help."""
    return Theme(
        {
            "usage": "bold",
            "heading": f"bold {OneColors.BLUE}",
            "option": OneColors.CYAN,
            "parameter": OneColors.LIGHT_YELLOW,
            "command": f"bold {OneColors.MAGENTA}",
        }
    )
