from glob import glob

from setuptools import setup

setup(
    name="rockfetch",
    version="1.0",
    description="System information beside a distribution banner, with PCI ID name lookup",
    python_requires=">=3.8",
    py_modules=["main", "system_probe", "pci_ids", "gpu", "packages", "themes", "i18n"],
    data_files=[("share/rockfetch/locales", glob("locales/*.json"))],
    install_requires=["rich>=12"],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rockfetch=main:main",
        ],
    },
)
