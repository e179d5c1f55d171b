"""Command line interface for seleniumctl."""

from typing import Annotated

from typer import Option, Typer

from seleniumctl.cli.commands import (
    download_cmd,
    get_cmd,
    latest_cmd,
    start_cmd,
    versions_cmd,
)
from seleniumctl.logging import configure_logging

app = Typer(
    name="seleniumctl",
    help="Download and run the Selenium standalone server",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Show debug logs")
    ] = False,
) -> None:
    configure_logging(verbose=verbose)


app.command(name="latest", help="Print the newest available server version")(
    latest_cmd
)
app.command(name="versions", help="List all available server versions")(versions_cmd)
app.command(name="download", help="Download a server jar unless already present")(
    download_cmd
)
app.command(name="start", help="Start a server from a local jar")(start_cmd)
app.command(name="get", help="Download a server version and start it")(get_cmd)
