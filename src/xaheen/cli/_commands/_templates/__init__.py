# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Templates command app for working with the template engine."""

# Import command modules to register commands with the app
from . import _read as _read, _render as _render, _watch as _watch
from ._app import app

__all__ = ["app"]
