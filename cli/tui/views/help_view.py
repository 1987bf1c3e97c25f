"""
cli/tui/views/help_view.py - 키 도움말 모달
"""

from __future__ import annotations

from typing import Any

from rich.table import Table

from cli.i18n import t

from ..cmd import Cmd
from ..view import View

# (키, 메시지 키)
HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "tui.help_global",
        (
            (":", "tui.help_command"),
            ("?", "tui.help_help"),
            ("R", "tui.help_regions"),
            ("P", "tui.help_profiles"),
            ("esc / backspace", "tui.help_back"),
            ("q / ctrl+c", "tui.help_quit"),
        ),
    ),
    (
        "tui.help_list",
        (
            ("j/k g/G pgup/pgdown", "tui.help_move"),
            ("/", "tui.help_filter"),
            ("c", "tui.help_clear"),
            ("ctrl+r", "tui.help_refresh"),
            ("d / enter", "tui.help_detail"),
            ("m", "tui.help_mark"),
            ("a", "tui.help_actions"),
            ("D", "tui.help_delete"),
            ("tab / 1-9", "tui.help_tabs"),
        ),
    ),
    (
        "tui.help_commands",
        (
            (":ec2/instances", "tui.help_cmd_navigate"),
            (":filter <text>", "tui.help_cmd_filter"),
            (":tag k=v | k~v | k", "tui.help_cmd_tag"),
            (":sort [asc|desc] <col>", "tui.help_cmd_sort"),
            (":diff a [b]", "tui.help_cmd_diff"),
            (":tags [k=v | k]", "tui.help_cmd_tags"),
            (":home  :services  :q", "tui.help_cmd_home"),
        ),
    ),
)


class HelpView(View):
    @property
    def title(self) -> str:
        return t("tui.help_title")

    def init(self) -> list[Cmd]:
        return []

    def update(self, msg: Any) -> list[Cmd]:
        return []

    def render(self) -> Table:
        table = Table(box=None, show_header=False, pad_edge=False, expand=True)
        table.add_column("key", style="bold cyan", no_wrap=True)
        table.add_column("description")
        for section, entries in HELP_SECTIONS:
            table.add_row(f"[bold underline]{t(section)}[/]", "")
            for key, message in entries:
                table.add_row(key, t(message))
            table.add_row("", "")
        return table
