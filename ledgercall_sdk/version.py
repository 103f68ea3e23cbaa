"""
Package version, taken from installed metadata or, in a source checkout,
from pyproject.toml.
"""
import importlib.metadata
import pathlib

import tomli

DIST_NAME = "ledgercall-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _resolve_version() -> str:
    try:
        return importlib.metadata.version(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        pass

    try:
        with open(PYPROJECT, "rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


__version__ = _resolve_version()
