"""Tests for packaging and test collection settings."""

import importlib.util
from pathlib import Path

import sasswatch

ROOT = Path(__file__).resolve().parents[2]


def test_build_tests_are_collected(request):
    norecursedirs = request.config.getini("norecursedirs")

    assert "build" not in norecursedirs
    assert "tests" in request.config.getini("testpaths")


def test_build_tests_exist():
    assert sorted(p.name for p in (ROOT / "tests" / "unit" / "build").glob("test_*.py"))


def test_setup_reads_package_version():
    module_spec = importlib.util.spec_from_file_location("sasswatch_setup", ROOT / "setup.py")
    setup_module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(setup_module)

    assert setup_module.read_version() == sasswatch.__version__
