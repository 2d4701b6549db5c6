"""Checks that every library and CLI package is picked up for installation."""

from pathlib import Path

from setuptools import find_packages

_SRC = Path(__file__).resolve().parent.parent / "src"


def test_all_packages_are_discovered():
    packages = set(find_packages(where=str(_SRC), include=["globalwinescore*"]))
    assert {
        "globalwinescore",
        "globalwinescore.auth",
        "globalwinescore.core",
        "globalwinescore.providers",
        "globalwinescore.providers.globalwinescore",
        "globalwinescore.services",
        "globalwinescore_cli",
    } <= packages
