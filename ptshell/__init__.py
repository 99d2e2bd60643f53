from __future__ import annotations

from .shell_host import main, render_free_map, render_page_table, run_commands

__all__ = ["main", "render_free_map", "render_page_table", "run_commands"]
