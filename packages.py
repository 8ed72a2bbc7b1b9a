"""
Installed-package counts, read straight from package-manager databases

Every counter takes a filesystem root so the same code counts the host and
each Bedrock stratum (/bedrock/strata/<name>).  No package manager is ever
executed.
"""

import json
import logging
import os
import sqlite3
from pathlib import Path
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

BEDROCK_STRATA = "bedrock/strata"


def _count_entries(path: Path, dirs_only: bool = False) -> int:
    """Number of non-hidden entries in a directory; 0 if it is missing."""
    count = 0
    try:
        with os.scandir(path) as it:
            for entry in it:
                if entry.name.startswith("."):
                    continue
                if dirs_only and not entry.is_dir():
                    continue
                count += 1
    except OSError:
        return 0
    return count


# ── Per-manager counters ───────────────────────────────────────────────────────

def count_dpkg(root: Path) -> int:
    """Stanzas in var/lib/dpkg/status whose Status says installed."""
    count = 0
    status = ""
    try:
        with open(root / "var/lib/dpkg/status", "r", encoding="utf-8", errors="ignore") as f:
            for raw_line in f:
                line = raw_line.rstrip("\n")
                if not line:
                    # End of a stanza
                    if status.endswith(" installed"):
                        count += 1
                    status = ""
                elif line.startswith("Status: "):
                    status = line
        # Handle a trailing stanza with no final blank line
        if status.endswith(" installed"):
            count += 1
    except OSError:
        return 0
    return count


def count_pacman(root: Path) -> int:
    # local/ also holds the ALPM_DB_VERSION file
    return _count_entries(root / "var/lib/pacman/local", dirs_only=True)


def count_emerge(root: Path) -> int:
    """Portage keeps one directory per package under var/db/pkg/<category>/."""
    count = 0
    try:
        with os.scandir(root / "var/db/pkg") as it:
            for category in it:
                if category.is_dir() and not category.name.startswith("."):
                    count += _count_entries(Path(category.path), dirs_only=True)
    except OSError:
        return 0
    return count


def count_rpm(root: Path) -> int:
    """Rows in the Packages table of the sqlite rpmdb (rpm >= 4.16)."""
    db_path = root / "var/lib/rpm/rpmdb.sqlite"
    if not db_path.is_file():
        return 0
    try:
        conn = sqlite3.connect(db_path.resolve().as_uri() + "?mode=ro", uri=True)
        try:
            (count,) = conn.execute("SELECT COUNT(*) FROM Packages").fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.debug("Cannot read rpmdb %s: %s", db_path, e)
        return 0
    return int(count)


def count_apk(root: Path) -> int:
    try:
        with open(root / "lib/apk/db/installed", "r", encoding="utf-8", errors="ignore") as f:
            return sum(1 for line in f if line.startswith("P:"))
    except OSError:
        return 0


def count_flatpak(root: Path) -> int:
    return _count_entries(root / "var/lib/flatpak/app", dirs_only=True)


def count_snap(root: Path) -> int:
    snap_dir = root / "snap"
    count = _count_entries(snap_dir, dirs_only=True)
    if count and (snap_dir / "bin").is_dir():
        count -= 1
    return count


def count_nix(root: Path) -> int:
    """Elements of the default nix profile manifest."""
    manifest = root / "nix/var/nix/profiles/default/manifest.json"
    try:
        with open(manifest, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return 0
    elements = data.get("elements", []) if isinstance(data, dict) else []
    # Manifest v3 keys elements by name, v2 keeps a list
    return len(elements)


COUNTERS: List[Tuple[str, Callable[[Path], int]]] = [
    ("nix", count_nix),
    ("dpkg", count_dpkg),
    ("rpm", count_rpm),
    ("emerge", count_emerge),
    ("pacman", count_pacman),
    ("apk", count_apk),
    ("flatpak", count_flatpak),
    ("snap", count_snap),
]


def count_packages(root: Path) -> Dict[str, int]:
    """Non-zero package counts under one root, keyed by manager."""
    counts: Dict[str, int] = {}
    for manager, counter in COUNTERS:
        n = counter(root)
        if n:
            counts[manager] = n
    return counts


def bedrock_strata(root: Path) -> List[Path]:
    """Stratum roots, skipping hidden entries and alias symlinks."""
    strata: List[Path] = []
    try:
        with os.scandir(root / BEDROCK_STRATA) as it:
            for entry in sorted(it, key=lambda e: e.name):
                if entry.name.startswith(".") or entry.is_symlink():
                    continue
                if entry.is_dir():
                    strata.append(Path(entry.path))
    except OSError:
        pass
    return strata


def count_all(root: Path, bedrock: bool = False) -> Dict[str, int]:
    """Counts for the host, or summed over every stratum on Bedrock."""
    if not bedrock:
        return count_packages(root)

    totals: Dict[str, int] = {}
    for stratum in bedrock_strata(root):
        for manager, n in count_packages(stratum).items():
            logger.debug("Stratum %s: %d %s packages", stratum.name, n, manager)
            totals[manager] = totals.get(manager, 0) + n
    # Keep the manager order of COUNTERS
    return {m: totals[m] for m, _ in COUNTERS if m in totals}


def format_counts(counts: Dict[str, int]) -> str:
    if not counts:
        return "Unknown"
    return ", ".join(f"{n} ({manager})" for manager, n in counts.items())
