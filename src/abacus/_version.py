"""Installed version of the Abacus distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "abacus-lang"


def get_version() -> str:
    """Version recorded in the installed package metadata."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"
