"""Services command app definition."""

from cyclopts import App

app = App(
    name="services",
    help="Browse the service catalog and installed services",
    help_on_error=True,
)
