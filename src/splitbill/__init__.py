"""Splitbill: split shared bills manually, equally or by menu item."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click and the database layer, so load it on first use
    if name == "main":
        from splitbill.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
