"""Config command app definition."""

from cyclopts import App

app = App(name="config", help="Manage Xaheen configuration", help_on_error=True)
