from importlib import import_module


def test_package_exposes_describe():
    """Basic smoke test to ensure the package and CLI entry point are importable."""
    module = import_module("nestspec")
    assert callable(module.describe), "describe entry point missing"
    assert callable(import_module("nestspec.cli").main)
