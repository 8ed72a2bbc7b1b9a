"""
GPU detection from PCI sysfs (/sys/bus/pci/devices)

Enumeration and name resolution do I/O; picking the GPU to show is a pure
function over the enumerated candidates so it can be tested on its own.
"""

import logging
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Sequence

import pci_ids

logger = logging.getLogger(__name__)

PCI_DISPLAY_CLASS = 0x03

# Discrete GPU vendors outrank integrated ones; virtual adapters come last.
VENDOR_SCORES = {
    0x10DE: 300,   # NVIDIA
    0x1002: 200,   # AMD/ATI
    0x8086: 100,   # Intel
    0x15AD: 10,    # VMware
    0x80EE: 10,    # VirtualBox
    0x1234: 10,    # QEMU/Bochs
    0x1AF4: 10,    # virtio-gpu
    0x1414: 10,    # Hyper-V
    0x1A03: 10,    # ASPEED BMC
}
DEFAULT_SCORE = 50
BOOT_VGA_BONUS = 5


class PciDevice(NamedTuple):
    slot: str
    vendor_id: int
    device_id: int
    class_code: int
    boot_vga: bool = False

    @property
    def pci_id(self) -> pci_ids.PciId:
        return pci_ids.PciId(self.vendor_id, self.device_id)


def score(device: PciDevice) -> int:
    value = VENDOR_SCORES.get(device.vendor_id, DEFAULT_SCORE)
    if device.boot_vga:
        value += BOOT_VGA_BONUS
    return value


def select_best(candidates: Iterable[PciDevice]) -> Optional[PciDevice]:
    """Highest-scoring candidate; the first one wins a tie."""
    best = None
    best_score = None
    for device in candidates:
        s = score(device)
        if best_score is None or s > best_score:
            best, best_score = device, s
    return best


def _read_hex(path: Path) -> int:
    return int(path.read_text().strip(), 16)


def enumerate_display_devices(root: Path = Path("/")) -> List[PciDevice]:
    """Display-class PCI devices, in slot order."""
    devices: List[PciDevice] = []
    pci_base = root / "sys/bus/pci/devices"
    try:
        entries = sorted(pci_base.iterdir())
    except OSError as e:
        logger.debug("Cannot list %s: %s", pci_base, e)
        return devices

    for dev in entries:
        try:
            class_code = _read_hex(dev / "class")
            if (class_code >> 16) != PCI_DISPLAY_CLASS:
                continue
            boot_vga = False
            try:
                boot_vga = (dev / "boot_vga").read_text().strip() == "1"
            except OSError:
                pass
            devices.append(PciDevice(
                slot=dev.name,
                vendor_id=_read_hex(dev / "vendor"),
                device_id=_read_hex(dev / "device"),
                class_code=class_code,
                boot_vga=boot_vga,
            ))
        except (OSError, ValueError) as e:
            logger.debug("Skipping PCI device %s: %s", dev.name, e)
            continue

    return devices


def get_gpu(root: Path = Path("/"), pci_ids_paths: Optional[Sequence[str]] = None) -> str:
    """Display string for the best GPU, e.g. "NVIDIA GeForce RTX 3070 Ti"."""
    best = select_best(enumerate_display_devices(root))
    if best is None:
        return "Unknown"
    logger.debug("Selected GPU %s (%04x:%04x)", best.slot, best.vendor_id, best.device_id)
    return str(pci_ids.resolve(*best.pci_id, paths=pci_ids_paths))
