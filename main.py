#!/usr/bin/env python3
"""
rockfetch - system information beside a distribution banner
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

import i18n
import pci_ids
import themes
from system_probe import SystemProbe

__version__ = "1.0"

THEME_CHOICES = ["auto"] + sorted(themes.THEMES)

logger = logging.getLogger("rockfetch")


def setup_logging(debug: bool = False) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rockfetch",
        description=i18n.t('cli.arg_description'),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rockfetch                          # Detect the distribution and print
  rockfetch --theme gentoo           # Force the Gentoo banner
  rockfetch --json                   # Machine-readable output
  rockfetch --pci-ids ./pci.ids      # Use a specific PCI ID registry
        """,
    )
    parser.add_argument(
        "--theme",
        "-t",
        choices=THEME_CHOICES,
        default=os.environ.get("ROCKFETCH_THEME", "auto"),
        help=i18n.t('cli.arg_theme'),
    )
    parser.add_argument(
        "--json", action="store_true", help=i18n.t('cli.arg_json')
    )
    parser.add_argument(
        "--no-color", action="store_true", help=i18n.t('cli.arg_no_color')
    )
    parser.add_argument(
        "--pci-ids", default=None, metavar="PATH", help=i18n.t('cli.arg_pci_ids')
    )
    parser.add_argument(
        "--root", default="/", metavar="DIR", help=i18n.t('cli.arg_root')
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("ROCKFETCH_DEBUG", "") not in ("", "0"),
        help=i18n.t('cli.arg_debug'),
    )
    parser.add_argument(
        "--version", "-V", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Entry point"""
    i18n.init()

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    pci_paths = pci_ids.default_paths()
    if args.pci_ids:
        pci_paths = [args.pci_ids] + pci_paths

    probe = SystemProbe(root=Path(args.root), pci_ids_paths=pci_paths)
    info = probe.collect_system_info()
    logger.debug("Collected %s", info)

    console = console or Console(highlight=False)
    if args.no_color:
        console.no_color = True

    if args.json:
        console.print_json(json.dumps(info))
        return 0

    theme_name = info["distro"] if args.theme == "auto" else args.theme
    for line in themes.render_fetch(info, themes.get_theme(theme_name)):
        console.print(line, soft_wrap=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
