# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Config command app for managing Xaheen configuration."""

# Import command modules to register commands with the app
# This must be done after app is imported but before it's used
from . import _read as _read, _validate as _validate, _write as _write
from ._app import app

__all__ = ["app"]
