"""Commands for the seleniumctl CLI."""

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

from rich.markup import escape
from rich.table import Table
from typer import Argument, Exit, Option

from seleniumctl.catalog import VersionCatalog, object_key
from seleniumctl.constants import DEFAULT_PORT, DEFAULT_TIMEOUT, LATEST
from seleniumctl.errors import SeleniumCtlError
from seleniumctl.fetcher import download
from seleniumctl.server import Server
from seleniumctl.utils import console, progress_spinner

PortOption = Annotated[int, Option("--port", "-p", help="Port the server listens on")]
TimeoutOption = Annotated[
    float,
    Option(
        "--timeout", "-t", help="Seconds to wait for the server to accept connections"
    ),
]
BackgroundOption = Annotated[
    bool,
    Option(
        "--background",
        "-b",
        help="Return once the server is ready instead of waiting for it to exit",
    ),
]
LogOption = Annotated[
    Path | None, Option("--log", help="File receiving the server's stdout and stderr")
]
ExtraArgs = Annotated[
    list[str] | None,
    Argument(help="Extra server arguments (put them after `--`)", show_default=False),
]
DirOption = Annotated[Path, Option("--dir", "-d", help="Directory to store jars in")]


@contextmanager
def cli_errors() -> Generator[None, None, None]:
    """Turn seleniumctl errors into a red message and exit code 1."""
    try:
        yield
    except (SeleniumCtlError, OSError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise Exit(code=1)


def latest_cmd() -> None:
    with cli_errors():
        console.print(VersionCatalog().latest(), soft_wrap=True)


def versions_cmd() -> None:
    with cli_errors():
        versions = VersionCatalog().available_versions()

    table = Table(title="Selenium standalone server versions")
    table.add_column("Version", style="cyan")
    table.add_column("Object key", style="dim")
    for version in versions:
        table.add_row(version, object_key(version))
    console.print(table)


def download_cmd(
    version: Annotated[str, Argument(help='Version to download, or "latest"')] = LATEST,
    directory: DirOption = Path("."),
) -> None:
    with cli_errors():
        with progress_spinner(
            f"📦 Fetching selenium server {version}...", "[green]✓[/green] Jar ready"
        ):
            path = download(version, directory=directory)
    console.print(str(path), soft_wrap=True)


def _run(server: Server, extra: list[str] | None) -> None:
    if extra:
        server << extra
    console.print(
        f"[bold chartreuse1]🚀 Starting {server.jar.name} on port {server.port}...[/bold chartreuse1]"
    )
    try:
        server.start()
    except KeyboardInterrupt:
        console.print("[yellow]Stopping server...[/yellow]")
        server.stop()
        return

    if server.background and server.process is not None:
        console.print(
            f"[green]✓[/green] Server ready at {server.webdriver_url} "
            f"(pid {server.process.pid})"
        )
    else:
        console.print("[dim]Server exited.[/dim]")


def start_cmd(
    jar: Annotated[Path, Argument(help="Path to the standalone server jar")],
    extra: ExtraArgs = None,
    port: PortOption = DEFAULT_PORT,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    background: BackgroundOption = False,
    log: LogOption = None,
) -> None:
    with cli_errors():
        server = Server(jar, port=port, timeout=timeout, background=background, log=log)
        _run(server, extra)


def get_cmd(
    version: Annotated[str, Argument(help='Version to run, or "latest"')] = LATEST,
    extra: ExtraArgs = None,
    directory: DirOption = Path("."),
    port: PortOption = DEFAULT_PORT,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    background: BackgroundOption = False,
    log: LogOption = None,
) -> None:
    with cli_errors():
        with progress_spinner(
            f"📦 Fetching selenium server {version}...", "[green]✓[/green] Jar ready"
        ):
            jar = download(version, directory=directory)
        server = Server(jar, port=port, timeout=timeout, background=background, log=log)
        _run(server, extra)
