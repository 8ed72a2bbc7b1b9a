"""
System Probe - collects the facts shown next to the fetch banner

Sources
───────
• distro / version → /bedrock/etc/bedrock-release, /etc/os-release
• kernel           → /proc/sys/kernel/osrelease (platform.release() fallback)
• uptime, memory   → /proc/uptime, /proc/meminfo
• CPU              → /proc/cpuinfo
• GPU              → /sys/bus/pci/devices + pci.ids (see gpu.py, pci_ids.py)
• WM, shell        → XDG_CURRENT_DESKTOP / DESKTOP_SESSION / SHELL, /proc/*/comm
• terminal         → parent process chain via /proc/<pid>/stat
• packages         → package-manager databases (see packages.py)

Every probe reads relative to ``root`` so tests can point it at a fake tree.
A probe that cannot find its data returns "Unknown"; nothing raises.
"""

import logging
import os
import platform
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import gpu
import packages

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

FIELDS = [
    "version", "kernel", "uptime", "wm", "packages",
    "terminal", "memory", "shell", "cpu", "gpu",
]

# comm name → display name, checked in this order
_WINDOW_MANAGERS = [
    ("i3", "i3"),
    ("sway", "Sway"),
    ("bspwm", "bspwm"),
    ("dwm", "dwm"),
    ("awesome", "Awesome"),
    ("Hyprland", "Hyprland"),
    ("river", "river"),
    ("openbox", "Openbox"),
]

# Processes between the fetch and the terminal emulator
_NOT_TERMINALS = {
    "sh", "bash", "zsh", "fish", "dash", "ksh", "tcsh", "csh", "nu", "elvish",
    "sudo", "doas", "su", "login", "tmux: server", "screen", "python", "python3",
    "rockfetch", "strat",
}


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def format_uptime(seconds: float) -> str:
    """Render as "2 days, 3 hours, 4 minutes", leaving out zero days and hours."""
    total = int(seconds)
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    parts = []
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    parts.append(_plural(minutes, "minute"))
    return ", ".join(parts)


def format_memory(total_kb: int, available_kb: int) -> str:
    used_kb = total_kb - available_kb
    if total_kb >= 1024 * 1024:
        return "%.0fGi / %.0fGi" % (used_kb / 1024 / 1024, total_kb / 1024 / 1024)
    return "%dMi / %dMi" % (used_kb // 1024, total_kb // 1024)


def parse_os_release(text: str) -> Dict[str, str]:
    release: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if "=" in line and not line.startswith("#"):
            key, _, value = line.partition("=")
            release[key] = value.strip().strip('"').strip("'")
    return release


def clean_cpu_name(name: str) -> str:
    name = re.sub(r"\((R|r|TM|tm)\)", "", name)
    return re.sub(r"\s+", " ", name).strip()


class SystemProbe:
    """Collects fetch fields from one filesystem root"""

    def __init__(
        self,
        root: Path = Path("/"),
        environ: Optional[Mapping[str, str]] = None,
        ppid: Optional[int] = None,
        pci_ids_paths: Optional[Sequence[str]] = None,
    ):
        self.root = Path(root)
        self.environ = os.environ if environ is None else environ
        self.ppid = os.getppid() if ppid is None else ppid
        self.pci_ids_paths = pci_ids_paths
        self.system_info: Dict[str, str] = {}

    def _path(self, rel: str) -> Path:
        return self.root / rel.lstrip("/")

    def _read(self, rel: str) -> str:
        return self._path(rel).read_text(encoding="utf-8", errors="replace")

    def collect_system_info(self) -> Dict[str, str]:
        """Run every probe; values are display strings."""
        distro = self.get_distro()
        self.system_info = {
            "distro": distro,
            "version": self.get_version(distro),
            "kernel": self.get_kernel(),
            "uptime": self.get_uptime(),
            "wm": self.get_wm(),
            "packages": self.get_packages(distro),
            "terminal": self.get_terminal(),
            "memory": self.get_memory(),
            "shell": self.get_shell(),
            "cpu": self.get_cpu(),
            "gpu": self.get_gpu(),
        }
        return self.system_info

    # ── Distribution ───────────────────────────────────────────────────────

    def _os_release(self) -> Dict[str, str]:
        for rel in ("/etc/os-release", "/usr/lib/os-release"):
            try:
                return parse_os_release(self._read(rel))
            except OSError:
                continue
        return {}

    def get_distro(self) -> str:
        """Theme key: bedrock, gentoo, cachyos or generic."""
        if self._path("/bedrock/etc/bedrock-release").exists():
            return "bedrock"
        release = self._os_release()
        ids = [release.get("ID", "").lower()] + release.get("ID_LIKE", "").lower().split()
        for distro in ("cachyos", "gentoo"):
            if distro in ids:
                return distro
        return "generic"

    def get_version(self, distro: Optional[str] = None) -> str:
        distro = distro or self.get_distro()
        if distro == "bedrock":
            for rel in ("/bedrock/etc/bedrock-release", "/bedrock/etc/os-release"):
                try:
                    text = self._read(rel)
                except OSError:
                    continue
                release = parse_os_release(text)
                if release.get("VERSION"):
                    return release["VERSION"]
                # bedrock-release is usually one line: "Bedrock Linux 0.7.31beta2 Poki"
                first = text.strip().splitlines()[0] if text.strip() else ""
                if first.startswith("Bedrock Linux "):
                    return first[len("Bedrock Linux "):].strip()
            return UNKNOWN

        release = self._os_release()
        return release.get("PRETTY_NAME") or release.get("NAME") or UNKNOWN

    # ── Kernel / uptime / memory ───────────────────────────────────────────

    def get_kernel(self) -> str:
        try:
            return self._read("/proc/sys/kernel/osrelease").strip() or UNKNOWN
        except OSError:
            pass
        if self.root == Path("/"):
            return platform.release() or UNKNOWN
        return UNKNOWN

    def get_uptime(self) -> str:
        try:
            return format_uptime(float(self._read("/proc/uptime").split()[0]))
        except (OSError, ValueError, IndexError) as e:
            logger.debug("uptime unavailable: %s", e)
            return UNKNOWN

    def get_memory(self) -> str:
        meminfo: Dict[str, int] = {}
        try:
            for line in self._read("/proc/meminfo").splitlines():
                key, _, val = line.partition(":")
                try:
                    meminfo[key.strip()] = int(val.split()[0])
                except (ValueError, IndexError):
                    pass
        except OSError as e:
            logger.debug("meminfo unavailable: %s", e)
            return UNKNOWN

        total_kb = meminfo.get("MemTotal", 0)
        if total_kb <= 0 or "MemAvailable" not in meminfo:
            return UNKNOWN
        return format_memory(total_kb, meminfo["MemAvailable"])

    # ── Session ────────────────────────────────────────────────────────────

    def _running_commands(self) -> List[str]:
        comms: List[str] = []
        try:
            for pid_dir in self._path("/proc").iterdir():
                if not pid_dir.name.isdigit():
                    continue
                try:
                    comms.append((pid_dir / "comm").read_text().strip())
                except OSError:
                    continue
        except OSError:
            pass
        return comms

    def get_wm(self) -> str:
        for var in ("XDG_CURRENT_DESKTOP", "DESKTOP_SESSION"):
            value = self.environ.get(var, "")
            if value:
                return value

        running = set(self._running_commands())
        for comm, name in _WINDOW_MANAGERS:
            if comm in running:
                return name
        return UNKNOWN

    def _parent_of(self, pid: int) -> Optional[int]:
        try:
            stat = self._read(f"/proc/{pid}/stat")
        except OSError:
            return None
        # comm may contain spaces and parens; fields resume after the last ")"
        fields = stat[stat.rfind(")") + 2:].split()
        try:
            return int(fields[1])
        except (IndexError, ValueError):
            return None

    def get_terminal(self) -> str:
        """First ancestor process that is not a shell or wrapper."""
        pid: Optional[int] = self.ppid
        first_comm = None
        for _ in range(16):
            if not pid or pid <= 1:
                break
            try:
                comm = self._read(f"/proc/{pid}/comm").strip()
            except OSError:
                break
            if first_comm is None:
                first_comm = comm
            if comm not in _NOT_TERMINALS:
                return comm
            pid = self._parent_of(pid)
        return first_comm or UNKNOWN

    def get_shell(self) -> str:
        shell = self.environ.get("SHELL", "")
        return shell.rsplit("/", 1)[-1] if shell else UNKNOWN

    # ── Hardware ───────────────────────────────────────────────────────────

    def get_cpu(self) -> str:
        try:
            cpuinfo = self._read("/proc/cpuinfo")
        except OSError as e:
            logger.debug("cpuinfo unavailable: %s", e)
            return UNKNOWN

        fallback = ""
        for line in cpuinfo.splitlines():
            key, _, value = line.partition(":")
            key = key.strip()
            if key == "model name" and value.strip():
                return clean_cpu_name(value)
            if key in ("Hardware", "Processor") and value.strip() and not fallback:
                fallback = value
        return clean_cpu_name(fallback) if fallback else UNKNOWN

    def get_gpu(self) -> str:
        return gpu.get_gpu(self.root, self.pci_ids_paths)

    def get_packages(self, distro: Optional[str] = None) -> str:
        distro = distro or self.get_distro()
        counts = packages.count_all(self.root, bedrock=(distro == "bedrock"))
        return packages.format_counts(counts)

