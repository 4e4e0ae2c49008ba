"""Terminal progress spinner for wasmedgeup."""

import sys
import time
from typing import Optional, Self, TextIO

from .utils import format_bytes


class Spinner:
    """A native spinner with an optional progress bar for downloads and extraction."""

    SPINNER_CHARS = "⠟⠯⠷⠾⠽⠻"

    def __init__(
        self,
        desc: str = "",
        total: Optional[int] = None,
        unit: Optional[str] = None,
        disable: bool = False,
        fps_limit: Optional[float] = None,
        width: int = 10,
        stream: Optional[TextIO] = None,
    ):
        """Initialize the spinner.

        Args:
            desc: Description text to display before the spinner
            total: Total number of units, enables the progress bar when known
            unit: Unit of measurement; 'B' formats amounts and rates as bytes
            disable: Disable all display output
            fps_limit: Maximum display updates per second
            width: Width of the progress bar in characters
            stream: Output stream (default: stderr)
        """
        self.desc = desc
        self.total = total
        self.unit = unit
        self.disable = disable
        self.fps_limit = fps_limit
        self.width = max(1, width)
        self.stream = stream or sys.stderr

        self.current = 0
        self.start_time = time.time()
        self._spinner_idx = 0
        self._last_update_time = 0.0
        self._current_line = ""
        self._completed = False

    def __enter__(self) -> Self:
        if not self.disable:
            self._render(force=True)
        return self

    def __exit__(self, *args: object) -> None:
        if not self.disable:
            self._clear()

    def _next_char(self) -> str:
        char = self.SPINNER_CHARS[self._spinner_idx % len(self.SPINNER_CHARS)]
        self._spinner_idx += 1
        return char

    def _format_amount(self, value: float) -> str:
        if self.unit == "B":
            return format_bytes(int(value))
        return f"{value:.0f}{self.unit or ''}"

    def _format_line(self, now: float) -> str:
        parts = [f"{self.desc}: {self._next_char()}"]

        if self.total:
            percent = min(self.current / self.total, 1.0)
            filled = int(self.width * percent)
            bar = "█" * filled + "-" * (self.width - filled)
            parts.append(f"|{bar}| {percent * 100:.1f}%")
        elif self.unit:
            parts.append(self._format_amount(self.current))

        elapsed = now - self.start_time
        if self.unit and elapsed > 0:
            parts.append(f"({self._format_amount(self.current / elapsed)}/s)")

        return " ".join(parts)

    def _render(self, force: bool = False) -> None:
        now = time.time()
        if not force and self.fps_limit and self.fps_limit > 0:
            if now - self._last_update_time < 1.0 / self.fps_limit:
                return
        self._last_update_time = now

        line = self._format_line(now)
        padding = " " * max(0, len(self._current_line) - len(line))
        self._current_line = line
        self.stream.write(f"\r{line}{padding}")
        self.stream.flush()

    def _clear(self) -> None:
        self.stream.write("\r" + " " * len(self._current_line) + "\r")
        self.stream.flush()
        self._current_line = ""

    def update(self, n: int = 1) -> None:
        """Advance progress by n units."""
        self.current += n
        if not self.disable:
            self._render()

    def finish(self) -> None:
        """Show the completed state on its own line."""
        if self._completed:
            return
        self._completed = True
        if self.total:
            self.current = self.total
        if self.disable:
            return
        self._render(force=True)
        self.stream.write("\n")
        self.stream.flush()
        self._current_line = ""
