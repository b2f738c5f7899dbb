"""Progress indicators and status messages for the terminal."""

from __future__ import annotations

import sys
import threading
from typing import TextIO

from tqdm import tqdm

from smartcommit.styles import (
    BODY_STYLE,
    INFO_STYLE,
    MUTED_STYLE,
    is_no_color,
    render,
    render_error_box,
    render_success_box,
    render_warning_box,
)

_FANCY_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
_PLAIN_FRAMES = ("|", "/", "-", "\\")


class StreamingSpinner:
    """Prints a message followed by one mark per streamed chunk."""

    def __init__(self, message: str, stream: TextIO | None = None) -> None:
        self.message = message
        self.stream = stream
        self.dots = 0
        self.max_dots = 3
        self.started = False

    def _write(self, text: str) -> None:
        out = self.stream if self.stream is not None else sys.stdout
        out.write(text)
        out.flush()

    def start(self) -> None:
        """Print the message once."""
        if not self.started:
            self._write(render(INFO_STYLE, self.message))
            self.started = True

    def update(self) -> None:
        """Print a progress mark, starting the spinner if needed."""
        if not self.started:
            self.start()
        self._write("." if is_no_color() else render(MUTED_STYLE, "●"))
        self.dots += 1
        if self.dots > self.max_dots:
            self.dots = 0

    def stop(self) -> None:
        """End the line if the spinner was started."""
        if self.started:
            self._write("\n")


class AnimatedMessage:
    """A message with a spinning frame redrawn in a background thread."""

    interval = 0.1

    def __init__(self, message: str, writer: TextIO | None = None) -> None:
        self.message = message
        self.writer = writer if writer is not None else sys.stdout
        self.frames = _PLAIN_FRAMES if is_no_color() else _FANCY_FRAMES
        self.current = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Begin redrawing the message."""
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop redrawing and return the cursor to the line start."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self.writer.write("\r")
        self.writer.flush()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self._update()

    def _update(self) -> None:
        frame = self.frames[self.current]
        if is_no_color():
            self.writer.write(f"\r{frame} {self.message}")
        else:
            self.writer.write(f"\r{render(INFO_STYLE, frame)} {render(BODY_STYLE, self.message)}")
        self.writer.flush()
        self.current = (self.current + 1) % len(self.frames)


def new_progress_bar(maximum: int, description: str) -> tqdm:
    """Return a progress bar on standard error counting up to ``maximum``."""
    if is_no_color():
        return tqdm(
            total=maximum,
            desc=description,
            file=sys.stderr,
            dynamic_ncols=True,
            mininterval=0.065,
        )
    return tqdm(
        total=maximum,
        desc=render(INFO_STYLE, description),
        file=sys.stderr,
        dynamic_ncols=True,
        mininterval=0.065,
        ascii="░█",
        bar_format=(
            "{desc}: {percentage:3.0f}% ▐{bar}▌ {n_fmt}/{total_fmt} "
            "[{elapsed}<{remaining}, {rate_fmt}{postfix}]"
        ),
    )


def show_success(message: str) -> None:
    """Print a success message."""
    print(f"✓ {message}" if is_no_color() else render_success_box(message))


def show_error(message: str) -> None:
    """Print an error message."""
    print(f"✗ {message}" if is_no_color() else render_error_box(message))


def show_warning(message: str) -> None:
    """Print a warning message."""
    print(f"⚠ {message}" if is_no_color() else render_warning_box(message))


def show_info(message: str) -> None:
    """Print an informational message."""
    if is_no_color():
        print(f"ℹ {message}")
    else:
        print(render(INFO_STYLE, "ℹ ") + render(BODY_STYLE, message))