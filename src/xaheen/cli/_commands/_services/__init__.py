# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Services command app for browsing and managing services."""

# Import command modules to register commands with the app
from . import _commands as _commands
from ._app import app

__all__ = ["app"]
