"""Templates command app definition."""

from cyclopts import App

app = App(
    name="templates",
    help="Inspect, render and watch Handlebars templates",
    help_on_error=True,
)
