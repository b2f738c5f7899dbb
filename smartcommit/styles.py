"""Terminal styles and helpers for rendering styled text."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, replace

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

PRIMARY_COLOR = "#007AFF"
SUCCESS_COLOR = "#34C759"
WARNING_COLOR = "#FF9500"
ERROR_COLOR = "#FF3B30"
MUTED_COLOR = "#8E8E93"
ACCENT_COLOR = "#5856D6"


def _dark_background() -> bool:
    value = os.environ.get("COLORFGBG", "")
    if not value:
        return True
    try:
        background = int(value.split(";")[-1])
    except ValueError:
        return True
    return background in (0, 1, 2, 3, 4, 5, 6, 8)


def _adaptive(light: str, dark: str) -> str:
    return dark if _dark_background() else light


_TEXT = _adaptive("#1C1C1E", "#FFFFFF")
_MUTED = _adaptive("#8E8E93", "#98989D")
_BORDER = _adaptive("#E5E5EA", "#38383A")
_CODE_BG = _adaptive("#F2F2F7", "#2C2C2E")


@dataclass(frozen=True)
class _Look:
    text: Style = Style()
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)
    border: box.Box | None = None
    border_style: Style = Style()
    bottom_border: bool = False


TITLE_STYLE = _Look(text=Style(bold=True, color=_TEXT), padding=(1, 0, 1, 0))
SUBTITLE_STYLE = _Look(text=Style(color=_MUTED), padding=(0, 0, 1, 0))
BODY_STYLE = _Look(text=Style(color=_TEXT))
CONTAINER_STYLE = _Look(
    text=Style(color=_TEXT),
    padding=(1, 2, 1, 2),
    border=box.ROUNDED,
    border_style=Style(color=_BORDER),
)
HEADER_STYLE = _Look(
    text=Style(bold=True, color=PRIMARY_COLOR),
    padding=(1, 0, 1, 0),
    border_style=Style(color=_BORDER),
    bottom_border=True,
)
SUCCESS_STYLE = _Look(text=Style(bold=True, color=SUCCESS_COLOR))
ERROR_STYLE = _Look(text=Style(bold=True, color=ERROR_COLOR))
WARNING_STYLE = _Look(text=Style(bold=True, color=WARNING_COLOR))
INFO_STYLE = _Look(text=Style(color=PRIMARY_COLOR))
MUTED_STYLE = _Look(text=Style(color=_MUTED))
BUTTON_STYLE = _Look(
    text=Style(bold=True, color="#FFFFFF", bgcolor=PRIMARY_COLOR),
    padding=(0, 2, 0, 2),
    border=box.ROUNDED,
)
SECONDARY_BUTTON_STYLE = _Look(
    text=Style(color=PRIMARY_COLOR),
    padding=(0, 2, 0, 2),
    border=box.ROUNDED,
    border_style=Style(color=PRIMARY_COLOR),
)
CODE_STYLE = _Look(
    text=Style(color=_TEXT, bgcolor=_CODE_BG),
    padding=(0, 1, 0, 1),
    border=box.ROUNDED,
    border_style=Style(color=_BORDER),
)
COMMIT_MESSAGE_STYLE = _Look(
    text=Style(bold=True, color=_TEXT),
    padding=(1, 1, 1, 1),
    border=box.ROUNDED,
    border_style=Style(color=PRIMARY_COLOR),
)
HIGH_SEVERITY_STYLE = _Look(text=Style(bold=True, color=ERROR_COLOR))
MEDIUM_SEVERITY_STYLE = _Look(text=Style(bold=True, color=WARNING_COLOR))
LOW_SEVERITY_STYLE = _Look(text=Style(bold=True, color=SUCCESS_COLOR))


def is_no_color() -> bool:
    """Return True if the NO_COLOR environment variable disables colours."""
    return os.environ.get("NO_COLOR", "") != ""


def _print_to_string(renderable) -> str:
    plain = is_no_color()
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=not plain,
        color_system=None if plain else "truecolor",
        no_color=plain,
        width=10_000,
        highlight=False,
        emoji=False,
        legacy_windows=False,
    )
    console.print(renderable, end="", soft_wrap=True)
    return buffer.getvalue()


def render(style: _Look, text: str) -> str:
    """Render ``text`` with ``style`` into a string, with ANSI codes unless NO_COLOR is set."""
    if style.border is not None:
        panel = Panel(
            Text.from_ansi(text, style=style.text),
            box=style.border,
            border_style=style.border_style,
            padding=style.padding,
            expand=False,
        )
        return _print_to_string(panel).rstrip("\n")

    top, right, bottom, left = style.padding
    lines = [Text.from_ansi(line, style=style.text) for line in text.split("\n")]
    width = max(line.cell_len for line in lines) + left + right

    rows = [Text(" " * width) for _ in range(top)]
    for line in lines:
        row = Text(" " * left)
        row.append_text(line)
        row.append(" " * (width - left - line.cell_len))
        rows.append(row)
    rows.extend(Text(" " * width) for _ in range(bottom))
    if style.bottom_border:
        rows.append(Text("─" * width, style=style.border_style))

    return "\n".join(_print_to_string(row) for row in rows)


def get_severity_style(severity: str) -> _Look:
    """Return the style for a severity level such as HIGH, MEDIUM or LOW."""
    return {
        "HIGH": HIGH_SEVERITY_STYLE,
        "MEDIUM": MEDIUM_SEVERITY_STYLE,
        "LOW": LOW_SEVERITY_STYLE,
    }.get(severity.upper(), BODY_STYLE)


def get_severity_icon(severity: str) -> str:
    """Return the marker shown before a suggestion of the given severity."""
    level = severity.upper()
    if is_no_color():
        return {"HIGH": "[HIGH]", "MEDIUM": "[MED]", "LOW": "[LOW]"}.get(level, "")
    return {"HIGH": "🔴", "MEDIUM": "🟡", "LOW": "🟢"}.get(level, "⚪")


def create_separator(width: int) -> str:
    """Return a muted thin line of ``width`` cells (60 if not positive)."""
    if width <= 0:
        width = 60
    return render(MUTED_STYLE, "─" * width)


def create_divider(width: int) -> str:
    """Return a muted thick line of ``width`` cells (60 if not positive)."""
    if width <= 0:
        width = 60
    return render(MUTED_STYLE, "━" * width)


def render_box(title: str, content: str) -> str:
    """Render a titled box around ``content``."""
    title_rendered = render(HEADER_STYLE, title)
    content_rendered = render(BODY_STYLE, content)
    return render(CONTAINER_STYLE, f"{title_rendered}\n\n{content_rendered}")


def _status_box(color: str, mark_style: _Look, mark: str, message: str) -> str:
    style = replace(CONTAINER_STYLE, border_style=Style(color=color), text=Style(color=_TEXT))
    content = f"{render(mark_style, mark)} {render(BODY_STYLE, message)}"
    return render(style, content)


def render_success_box(message: str) -> str:
    """Render ``message`` in a green box with a check mark."""
    return _status_box(SUCCESS_COLOR, SUCCESS_STYLE, "✓", message)


def render_error_box(message: str) -> str:
    """Render ``message`` in a red box with a cross."""
    return _status_box(ERROR_COLOR, ERROR_STYLE, "✗", message)


def render_warning_box(message: str) -> str:
    """Render ``message`` in an orange box with a warning sign."""
    return _status_box(WARNING_COLOR, WARNING_STYLE, "⚠", message)