import pytest


SAMPLE_PCI_IDS = (
    "#\n"
    "#\tList of PCI ID's\n"
    "#\n"
    "# Syntax:\n"
    "# vendor  vendor_name\n"
    "#\tdevice  device_name\t\t\t\t<-- single tab\n"
    "#\n"
    "\n"
    "0001  SafeNet (wrong ID)\n"
    "0e11  Compaq Computer Corporation\n"
    "\t0001  PCI to EISA Bridge\n"
    "\tae10  Smart-2/P RAID Controller\n"
    "\t\t0e11 4030  Smart-2/P Array Controller\n"
    "1002  Advanced Micro Devices, Inc. [AMD/ATI]\n"
    "\t73bf  Navi 21 [Radeon RX 6800/6800 XT / 6900 XT]\n"
    "\t\t1002 0e3a  Radeon RX 6900 XT\n"
    "\t9874  Wani [Radeon R5/R6/R7 Graphics]\n"
    "102b  Matrox Electronics Systems Ltd.\n"
    "\t0522  MGA G200e [Pilot] ServerEngines (SEP1)\n"
    "10de  NVIDIA Corporation\n"
    "\t1180  GK104 [GeForce GTX 680]\n"
    "# GA104 parts\n"
    "\t2482  GA104 [GeForce RTX 3070 Ti]\n"
    "\t2484  GA104 [GeForce RTX 3070]\n"
    "\t\t1043 87b8  ROG Strix RTX 3070\n"
    "\t25a0  GA107M []\n"
    "1234  Technical Corp.\n"
    "\t1111  Bochs/QEMU Display\n"
    "13b5  ARM\n"
    "15ad  VMware\n"
    "\t0405  SVGA II Adapter\n"
    "1af4  Red Hat, Inc.\n"
    "\t1050  Virtio 1.0 GPU\n"
    "5143  Qualcomm Inc.\n"
    "8086  Intel Corporation\n"
    "\t3e92  CoffeeLake-S GT2 [UHD Graphics 630]\n"
    "\t9a49  TigerLake-LP GT2 [Iris Xe Graphics]\n"
    "abcd  Example Widgets Corp.\n"
    "\t0001  Widget\n"
    "ffff  Illegal Vendor ID\n"
    "\n"
    "# List of known device classes, subclasses and programming interfaces\n"
    "\n"
    "C 00  Unclassified device\n"
    "\t00  Non-VGA unclassified device\n"
    "C 03  Display controller\n"
    "\t00  VGA compatible controller\n"
)


@pytest.fixture
def sample_registry() -> bytes:
    return SAMPLE_PCI_IDS.encode()


@pytest.fixture
def pci_ids_file(tmp_path, sample_registry):
    path = tmp_path / "pci.ids"
    path.write_bytes(sample_registry)
    return path


@pytest.fixture
def fake_root(tmp_path):
    """Empty filesystem root; tests populate it with write_file()."""
    root = tmp_path / "root"
    root.mkdir()
    return root


def write_file(root, rel, content=""):
    path = root / rel.lstrip("/")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
