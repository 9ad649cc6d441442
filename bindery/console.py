# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instances for Bindery CLI applications."""
from rich.console import Console

from bindery.themes import get_bindery_theme

console = Console(theme=get_bindery_theme())
error_console = Console(stderr=True, theme=get_bindery_theme())
