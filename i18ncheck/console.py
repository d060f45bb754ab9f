from __future__ import annotations

import threading
from collections import Counter
from typing import Iterable, Optional

from rich.console import Console
from rich.text import Text

LEVEL_STYLES = {
    "INFO": "bold green",
    "WARN": "bold yellow",
    "ERROR": "bold red",
    "DEBUG": "bold blue",
    "DONE": "bold cyan",
}


class RichLogger:
    """Console logger shared by scan workers.

    Messages are never parsed as rich markup, since file paths and bundle
    values routinely contain square brackets. ``counts`` tracks how many
    messages each level has emitted.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self.counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def log(self, level: str, msg: str) -> None:
        if level == "DEBUG" and not self.verbose:
            return
        tag = Text(level.ljust(5), style=LEVEL_STYLES.get(level, "bold"))
        with self._lock:
            self.counts[level] += 1
            self.console.log(tag, msg, markup=False, highlight=False)

    def info(self, msg: str) -> None:
        self.log("INFO", msg)

    def warn(self, msg: str) -> None:
        self.log("WARN", msg)

    def error(self, msg: str) -> None:
        self.log("ERROR", msg)

    def debug(self, msg: str) -> None:
        self.log("DEBUG", msg)

    def done(self, msg: str) -> None:
        self.log("DONE", msg)

    def section(self, title: str, lines: Iterable[str]) -> None:
        with self._lock:
            self.console.print(Text(title, style="bold"))
            for line in lines:
                self.console.print(Text(line))
