"""
Fetch banners and layout

A theme is a hand-drawn logo plus the styles for labels and values.  Two
layouts exist:

• stacked → the logo sits above the fields, which run beside a colour gutter
            (Bedrock's banner is too wide to share rows with text)
• side    → logo on the left, one field per row on the right

render_fetch() returns the lines as rich Text objects; printing them is up to
the caller.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from rich.text import Text

import i18n
from system_probe import FIELDS

Segment = Tuple[str, str]

# Nord palette mapped onto the 16 terminal colours
NORD0 = "bold black"
NORD1 = "bold bright_black"
NORD4 = "bright_white"
NORD7 = "cyan"
NORD8 = "bright_cyan"
NORD9 = "blue"
NORD10 = "bright_blue"
NORD11 = "bold bright_red"
NORD12 = "bright_yellow"
NORD13 = "yellow"
NORD14 = "green"
NORD15 = "bright_magenta"
FRAME = "bold"

DEFAULT_LABELS = {
    "version": "Version",
    "kernel": "Kernel",
    "uptime": "Uptime",
    "wm": "WM",
    "packages": "Packages",
    "terminal": "Terminal",
    "memory": "Memory",
    "shell": "Shell",
    "cpu": "CPU",
    "gpu": "GPU",
}


class Theme(NamedTuple):
    name: str
    logo: List[List[Segment]]
    label_styles: List[str]
    value_style: str
    stacked: bool = False
    gutter: Tuple[str, ...] = ()
    footer: Tuple[Segment, ...] = ()


def _plain(lines: Sequence[str], style: str) -> List[List[Segment]]:
    return [[(line, style)] for line in lines]


# ── Bedrock ────────────────────────────────────────────────────────────────────

_BS3 = "\\" * 3


def _bedrock_row(block: str, gutter: str, left: str, shape: str, right: str, box: Optional[str] = None) -> List[Segment]:
    row = [
        (" │", FRAME), (block, gutter), ("│", FRAME),
        (" │" + left, NORD1), (shape, FRAME), (right, NORD1),
    ]
    if box is not None:
        row.append((box, NORD11))
    return row


_BEDROCK_LOGO = [
    [(" ┌──┐", FRAME), (" ┌" + "─" * 34 + "┐ ", NORD1), ("┌────┐", NORD11)],
    _bedrock_row("▒▒", NORD1, "─", "\\" * 13, "─" * 20 + "│ ", "│ 境 │"),
    _bedrock_row("██", NORD0, "──", _BS3 + " " * 6 + _BS3, "─" * 20 + "│ ", "│    │"),
    _bedrock_row("██", NORD1, "───", _BS3 + " " * 6 + _BS3, "─" * 19 + "│ ", "│ 界 │"),
    _bedrock_row("██", NORD11, "────", _BS3 + " " * 6 + "\\" * 17, "────│ ", "└────┘"),
    _bedrock_row("██", NORD12, "─────", _BS3 + " " * 20 + _BS3, "───│"),
    _bedrock_row("██", NORD13, "──────", _BS3 + " " * 20 + _BS3, "──│"),
    _bedrock_row("██", NORD14, "───────", _BS3 + " " * 8 + "──────" + " " * 6 + _BS3, "─│"),
    _bedrock_row("██", NORD7, "────────", _BS3 + " " * 19 + "///", "─│"),
    _bedrock_row("██", NORD8, "─────────", _BS3 + " " * 17 + "///", "──│"),
    _bedrock_row("██", NORD9, "──────────", _BS3 + " " * 15 + "///", "───│"),
    _bedrock_row("██", NORD10, "───────────", _BS3 + "/" * 16, "────│"),
    [(" │", FRAME), ("██", NORD15), ("│", FRAME), (" └" + "─" * 34 + "┘", NORD1)],
]

BEDROCK = Theme(
    name="bedrock",
    logo=_BEDROCK_LOGO,
    label_styles=[
        NORD12, NORD12, NORD15, NORD15, NORD15,
        NORD13, NORD13, NORD13, NORD9, NORD9,
    ],
    value_style=NORD4,
    stacked=True,
    gutter=(NORD7, NORD8, NORD9, NORD10, NORD15, NORD11, NORD12, NORD13, NORD14, NORD1),
    footer=((" └──┘", FRAME),),
)

# ── Side-layout logos ──────────────────────────────────────────────────────────

GENTOO = Theme(
    name="gentoo",
    logo=_plain([
        "  _-----_   ",
        " (       \\  ",
        " \\    0   \\ ",
        "  \\        )",
        "  /      _/ ",
        " (     _-   ",
        " \\____-     ",
    ], "bold bright_magenta"),
    label_styles=["bold magenta"],
    value_style="white",
)

CACHYOS = Theme(
    name="cachyos",
    logo=[
        [("    /''''''''''''/", "bold bright_cyan")],
        [("   /''''''''''''/ ", "bold bright_cyan")],
        [("  /''''''/        ", "bold bright_cyan")],
        [(" /''''''/   ", "bold bright_cyan"), ("o", "bold green")],
        [(" \\......\\        ", "bold cyan")],
        [("  \\......\\   ", "bold cyan"), ("o", "bold green")],
        [("   \\.............../", "bold cyan")],
        [("    \\............./ ", "bold cyan")],
    ],
    label_styles=["bold bright_cyan"],
    value_style="white",
)

GENERIC = Theme(
    name="generic",
    logo=[
        [("     ___    ", "bold white")],
        [("    (", "bold white"), ("..", "bold white"), (" |   ", "bold white")],
        [("    (", "bold white"), ("<>", "bold yellow"), (" |   ", "bold white")],
        [("   / __  \\  ", "bold white")],
        [("  ( /  \\ /| ", "bold white")],
        [(" ", "bold white"), ("_", "bold yellow"), ("/\\ __)/", "bold white"), ("_", "bold yellow"), (")", "bold white")],
        [(" ", "bold white"), ("\\/", "bold yellow"), ("-____", "bold white"), ("\\/", "bold yellow")],
    ],
    label_styles=["bold yellow"],
    value_style="white",
)

THEMES: Dict[str, Theme] = {t.name: t for t in (BEDROCK, GENTOO, CACHYOS, GENERIC)}


def get_theme(name: str) -> Theme:
    return THEMES.get(name, GENERIC)


def _label(field: str) -> str:
    return i18n.t(f"field.{field}", default=DEFAULT_LABELS[field])


def _field_text(theme: Theme, index: int, field: str, value: str) -> Text:
    style = theme.label_styles[index % len(theme.label_styles)]
    return Text.assemble((f"{_label(field)}: ", style), (value, theme.value_style))


def render_fetch(info: Dict[str, str], theme: Theme, fields: Sequence[str] = FIELDS) -> List[Text]:
    """Lay out ``info`` next to ``theme``'s logo, one Text per output line."""
    lines: List[Text] = []

    if theme.stacked:
        for row in theme.logo:
            lines.append(Text.assemble(*row))
        for i, field in enumerate(fields):
            gutter_style = theme.gutter[i % len(theme.gutter)]
            block = "▒▒" if i == len(fields) - 1 else "██"
            line = Text.assemble((" │", FRAME), (block, gutter_style), ("│ ", FRAME))
            line.append_text(_field_text(theme, i, field, info.get(field, "")))
            lines.append(line)
        if theme.footer:
            lines.append(Text.assemble(*theme.footer))
        return lines

    logo = [Text.assemble(*row) for row in theme.logo]
    width = max((t.cell_len for t in logo), default=0)
    for i in range(max(len(logo), len(fields))):
        line = logo[i].copy() if i < len(logo) else Text()
        line.pad_right(width - line.cell_len + 3)
        if i < len(fields):
            line.append_text(_field_text(theme, i, fields[i], info.get(fields[i], "")))
        lines.append(line)
    return lines
