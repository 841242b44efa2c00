"""Config command app."""

from cyclopts import App

app = App(
    name="config",
    help="Inspect and validate configuration.",
    help_on_error=True,
)
