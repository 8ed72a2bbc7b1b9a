"""
PCI ID registry lookup - maps (vendor_id, device_id) to display names

Registry grammar (pci.ids as shipped by hwdata / pciutils)
──────────────────────────────────────────────────────────
• Comment line  → "#" at column 0, skipped everywhere
• Vendor line   → "vvvv  Vendor Name"          4 hex digits, two spaces
• Device line   → "\\tdddd  Device Name"        one tab, 4 hex digits, two spaces
• Subsystem     → "\\t\\tssss ssss  Name"        two tabs, ignored
• Class section → "C cc  Class Name" and below, after the last vendor

Vendor lines are assumed to be in ascending numeric order.  The vendor search
relies on that and does not verify it: an out-of-order registry can make an
existing vendor look absent.  Lookups never raise; anything not found comes
back as its "%04x" placeholder.
"""

import logging
import mmap
import os
from typing import List, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)

PCI_IDS_PATHS = [
    "/usr/share/hwdata/pci.ids",
    "/usr/share/misc/pci.ids",
    "/usr/share/pci.ids",
    "/var/lib/pciutils/pci.ids",
]

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

# Registry names are often legally verbose ("Advanced Micro Devices, Inc.
# [AMD/ATI]"); these IDs always display as a short fixed name.
_VENDOR_DISPLAY_NAMES = {
    0x10DE: "NVIDIA",
    0x1002: "AMD",
    0x1022: "AMD",
    0x8086: "Intel",
    0x106B: "Apple",
    0x15AD: "VMware",
    0x80EE: "VirtualBox",
    0x1414: "Microsoft",
    0x1A03: "ASPEED",
    0x1234: "QEMU",
    0x1AF4: "Red Hat",
}

_CORPORATE_SUFFIXES = (" Corporation", " Corp.", ", Inc.", " Inc.")


class PciId(NamedTuple):
    vendor_id: int
    device_id: int


class ResolvedName(NamedTuple):
    vendor_name: str
    device_name: str

    def __str__(self) -> str:
        return f"{self.vendor_name} {self.device_name}"


def parse_hex_id(token: bytes) -> Optional[int]:
    """Parse exactly four hex digits, or return None."""
    if len(token) != 4 or not all(c in _HEX_DIGITS for c in token):
        return None
    return int(token, 16)


def marketing_name(text: str) -> str:
    """Prefer a bracketed marketing name: "GK104 [GeForce GTX 680]" → "GeForce GTX 680"."""
    start = text.find("[")
    if start != -1:
        end = text.find("]", start + 1)
        if end != -1:
            inner = text[start + 1:end].strip()
            if inner:
                return inner
    return text


def normalize_vendor(vendor_id: int, name: str) -> str:
    """Short display name for a vendor found in the registry."""
    if vendor_id in _VENDOR_DISPLAY_NAMES:
        return _VENDOR_DISPLAY_NAMES[vendor_id]
    for suffix in _CORPORATE_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name.strip() or f"{vendor_id:04x}"


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").strip()


class PciIdDatabase:
    """Read-only view over a pci.ids registry.

    ``data`` is anything bytes-like that supports slicing, ``find`` and
    ``rfind`` (bytes or an mmap).  Use ``PciIdDatabase.open()`` to map the
    system registry; use the instance as a context manager so the map is
    released on every path.
    """

    def __init__(self, data=b"", path: Optional[str] = None, _file=None):
        self._buf = data
        self._size = len(data)
        self.path = path
        self._file = _file

    @classmethod
    def open(cls, paths: Optional[Sequence[str]] = None) -> "PciIdDatabase":
        """Map the first existing, non-empty registry; empty database if none."""
        for path in paths if paths is not None else default_paths():
            try:
                f = open(path, "rb")
            except OSError as e:
                logger.debug("pci.ids candidate %s unavailable: %s", path, e)
                continue
            try:
                if os.fstat(f.fileno()).st_size == 0:
                    logger.debug("pci.ids candidate %s is empty", path)
                    f.close()
                    continue
                buf = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
            except (OSError, ValueError) as e:
                logger.debug("Could not map %s: %s", path, e)
                f.close()
                continue
            logger.debug("Using PCI ID registry %s (%d bytes)", path, len(buf))
            return cls(buf, path=path, _file=f)

        logger.debug("No PCI ID registry found; names fall back to hex IDs")
        return cls()

    def close(self) -> None:
        if isinstance(self._buf, mmap.mmap):
            self._buf.close()
        if self._file is not None:
            self._file.close()
            self._file = None
        self._buf = b""
        self._size = 0

    def __enter__(self) -> "PciIdDatabase":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __len__(self) -> int:
        return self._size

    # ── Line-shape helpers ─────────────────────────────────────────────────

    def _line_start(self, pos: int) -> int:
        return self._buf.rfind(b"\n", 0, pos) + 1

    def _line_end(self, start: int) -> int:
        end = self._buf.find(b"\n", start)
        return self._size if end == -1 else end

    def _vendor_at(self, start: int) -> Optional[int]:
        """Vendor ID if the line at ``start`` has vendor shape, else None."""
        head = self._buf[start:start + 7]
        if len(head) < 6 or head[4:6] != b"  " or head[6:7] == b" ":
            return None
        return parse_hex_id(head[:4])

    # ── Lookups ────────────────────────────────────────────────────────────

    def find_vendor(self, vendor_id: int) -> Optional[int]:
        """Offset of the start of ``vendor_id``'s line, or None.

        Binary search over bytes: each probe snaps back to its line start and
        walks up line by line to the nearest vendor line, since a probe
        usually lands among device lines.
        """
        low, high = 0, self._size
        while low < high:
            mid = (low + high) // 2
            line = self._line_start(mid)
            found = self._vendor_at(line)
            while found is None and line > 0:
                line = self._line_start(line - 1)
                found = self._vendor_at(line)

            if found is None or found < vendor_id:
                # Header comments count as "before the target"
                low = mid + 1
            elif found > vendor_id:
                high = line
            else:
                return line
        return None

    def vendor_name(self, offset: int) -> str:
        return _decode(self._buf[offset + 6:self._line_end(offset)])

    def find_device(self, vendor_offset: int, device_id: int) -> Optional[str]:
        """Scan ``vendor_offset``'s block for ``device_id``; None at the block end."""
        pos = self._line_end(vendor_offset) + 1
        while pos < self._size:
            end = self._line_end(pos)
            first = self._buf[pos:pos + 1]
            if first == b"\t":
                head = self._buf[pos:pos + 8]
                if (
                    head[1:2] != b"\t"
                    and head[5:7] == b"  "
                    and parse_hex_id(head[1:5]) == device_id
                ):
                    return marketing_name(_decode(self._buf[pos + 7:end]))
            elif first not in (b"#", b"\n", b"\r"):
                # Next vendor line, or the class section
                return None
            pos = end + 1
        return None

    def lookup(self, vendor_id: int, device_id: int) -> ResolvedName:
        vendor = f"{vendor_id:04x}"
        device = f"{device_id:04x}"
        offset = self.find_vendor(vendor_id)
        if offset is None:
            logger.debug("Vendor %s not in registry", vendor)
            return ResolvedName(vendor, device)

        vendor = normalize_vendor(vendor_id, self.vendor_name(offset))
        name = self.find_device(offset, device_id)
        if name is None:
            logger.debug("Device %s not listed under vendor %04x", device, vendor_id)
            return ResolvedName(vendor, device)
        return ResolvedName(vendor, name)


def default_paths() -> List[str]:
    """Registry candidates, with $ROCKFETCH_PCI_IDS tried first when set."""
    override = os.environ.get("ROCKFETCH_PCI_IDS")
    return ([override] if override else []) + PCI_IDS_PATHS


def resolve(vendor_id: int, device_id: int, paths: Optional[Sequence[str]] = None) -> ResolvedName:
    """One-shot lookup against the system registry."""
    with PciIdDatabase.open(paths) as db:
        return db.lookup(vendor_id, device_id)
