import io

import pytest
from rich.console import Console

import i18n
import themes
from system_probe import FIELDS

INFO = {
    "distro": "bedrock",
    "version": "0.7.31beta2 Poki",
    "kernel": "6.16.4-200.fc42.x86_64",
    "uptime": "3 hours, 12 minutes",
    "wm": "sway",
    "packages": "40 (nix), 3076 (rpm)",
    "terminal": "kitty",
    "memory": "9Gi / 31Gi",
    "shell": "zsh",
    "cpu": "AMD Ryzen 5 3600 6-Core Processor",
    "gpu": "NVIDIA GeForce RTX 3070 Ti",
}


@pytest.fixture(autouse=True)
def english_labels():
    i18n.init(locale_override="en")


def _plain(lines):
    return [line.plain for line in lines]


def test_bedrock_stacked_layout():
    lines = _plain(themes.render_fetch(INFO, themes.BEDROCK))

    logo_rows = len(themes.BEDROCK.logo)
    assert len(lines) == logo_rows + len(FIELDS) + 1
    assert lines[0] == " ┌──┐ ┌" + "─" * 34 + "┐ ┌────┐"
    assert lines[1] == " │▒▒│ │─" + "\\" * 13 + "─" * 20 + "│ │ 境 │"
    assert lines[logo_rows] == " │██│ Version: 0.7.31beta2 Poki"
    assert lines[logo_rows + 4] == " │██│ Packages: 40 (nix), 3076 (rpm)"
    assert lines[-2] == " │▒▒│ GPU: NVIDIA GeForce RTX 3070 Ti"
    assert lines[-1] == " └──┘"


def test_bedrock_banner_frame_is_aligned():
    framed = _plain(themes.render_fetch(INFO, themes.BEDROCK))[1:len(themes.BEDROCK.logo) - 1]
    for line in framed:
        # gutter (5) + " │" + 34 inner cells + "│"
        assert line[41] == "│", line


@pytest.mark.parametrize("theme", [themes.GENTOO, themes.CACHYOS, themes.GENERIC])
def test_side_layout(theme):
    lines = themes.render_fetch(INFO, theme)
    plain = _plain(lines)

    assert len(lines) == max(len(theme.logo), len(FIELDS))
    width = max(line.cell_len for line in (themes.Text.assemble(*row) for row in theme.logo))
    for i, field in enumerate(FIELDS):
        label = themes.DEFAULT_LABELS[field]
        assert plain[i][width + 3:] == f"{label}: {INFO[field]}"


def test_missing_field_renders_empty_value():
    lines = _plain(themes.render_fetch({"version": "1.0"}, themes.GENERIC, fields=["version", "gpu"]))
    assert lines[0].endswith("Version: 1.0")
    assert lines[1].endswith("GPU: ")


def test_labels_are_translated(tmp_path):
    (tmp_path / "en.json").write_text('{"field.uptime": "Uptime"}')
    (tmp_path / "es.json").write_text('{"field.uptime": "Tiempo activo"}')
    i18n.init(locale_override="es_ES", locales_dir=tmp_path)

    lines = _plain(themes.render_fetch(INFO, themes.GENERIC, fields=["uptime", "kernel"]))

    assert lines[0].endswith("Tiempo activo: 3 hours, 12 minutes")
    assert lines[1].endswith("Kernel: 6.16.4-200.fc42.x86_64")


def test_get_theme_unknown_falls_back():
    assert themes.get_theme("gentoo") is themes.GENTOO
    assert themes.get_theme("arch") is themes.GENERIC


def test_rendered_lines_print_with_styles():
    buf = io.StringIO()
    console = Console(file=buf, force_terminal=True, color_system="standard", width=120)
    for line in themes.render_fetch(INFO, themes.BEDROCK):
        console.print(line, soft_wrap=True)
    out = buf.getvalue()
    assert "\x1b[" in out
    assert "Kernel: " in out


def test_theme_defaults_are_not_shared_lists():
    assert themes.GENTOO.gutter == () and themes.GENTOO.footer == ()
    assert isinstance(themes.BEDROCK.gutter, tuple)
    with pytest.raises(AttributeError):
        themes.GENERIC.footer.append((" └──┘", themes.FRAME))
