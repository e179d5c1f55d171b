import logging
import time
from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from typing_extensions import override

# legacy_windows=False enables the modern Windows console APIs (UTF-8 output)
console = Console(legacy_windows=False)


@contextmanager
def progress_spinner(
    description: str, success_message: str
) -> Generator[float, None, None]:
    """Show a transient spinner while the block runs, then a timed success line.

    Example:
        with progress_spinner("Downloading 4.0.0...", "Downloaded 4.0.0"):
            download("4.0.0")
    """
    started = time.perf_counter()

    with Progress(
        SpinnerColumn(finished_text=""),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        yield started

    console.print(f"{success_message} ({time.perf_counter() - started:.1f}s)")


class PrefixedLogHandler(logging.Handler):
    """Prints records as ``<time> | [component] | message`` on the rich console.

    The component is the last part of the logger name, so ``seleniumctl.server``
    prints as ``[server]``. Warnings are yellow and errors red.
    """

    def __init__(self, color: str = "bright_blue", width: int = 10):
        super().__init__()
        self.color: str = color
        self.width: int = width

    def _color_for(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR:
            return "red"
        if record.levelno >= logging.WARNING:
            return "yellow"
        return self.color

    @override
    def emit(self, record: logging.LogRecord) -> None:
        try:
            stamp = time.strftime("%H:%M:%S", time.localtime(record.created))
            stamp = f"{stamp}.{int(record.msecs):03d}"
            component = escape(f"[{record.name.rsplit('.', 1)[-1]}]").ljust(self.width)
            color = self._color_for(record)
            # Tracebacks and multi-line messages keep the prefix on every line.
            for line in self.format(record).splitlines():
                console.print(f"{stamp} | [{color}]{component}[/] | {escape(line)}")
        except Exception:
            self.handleError(record)
