"""Console reporter using Rich library for CLI output.

Command results go to stdout, errors to stderr. Dynamic text (keys, ETags,
service error messages) is printed with markup disabled so square brackets
in it are shown literally.
"""

from typing import Any, Optional

from rich.console import Console
from rich.markup import escape


class ConsoleReporter:
    """Rich-based console output for command results.

    Args:
        console: Console for results (defaults to stdout)
        error_console: Console for errors (defaults to stderr)
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.error_console = error_console or Console(
            stderr=True, highlight=False, soft_wrap=True
        )

    def message(self, text: str) -> None:
        """Print a plain result line."""
        self.console.print(text, markup=False)

    def entry(self, obj: Any) -> None:
        """Pretty-print one object entry from a listing."""
        self.console.print(obj)

    def progress(self, text: str) -> None:
        """Rewrite the current line in place."""
        out = self.console.file
        out.write(f"\r{text}")
        out.flush()

    def end_progress(self) -> None:
        """Move past a line written by progress()."""
        self.console.file.write("\n")

    def error(self, text: str) -> None:
        """Print an error line to stderr."""
        self.error_console.print("[bold red]Error:[/bold red]", escape(text))

