import io
import time

import pytest

from smartcommit.progress import (
    AnimatedMessage,
    StreamingSpinner,
    new_progress_bar,
    show_error,
    show_info,
    show_success,
    show_warning,
)


@pytest.fixture
def plain(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)


def test_spinner_start_prints_message_once(plain):
    stream = io.StringIO()
    spinner = StreamingSpinner("Generating...", stream)
    spinner.start()
    spinner.start()
    assert stream.getvalue() == "Generating..."


def test_spinner_update_starts_and_adds_dots(plain):
    stream = io.StringIO()
    spinner = StreamingSpinner("Working", stream)
    spinner.update()
    spinner.update()
    spinner.stop()
    assert stream.getvalue() == "Working" + ".." + "\n"


def test_spinner_stop_without_start_writes_nothing(plain):
    stream = io.StringIO()
    StreamingSpinner("Idle", stream).stop()
    assert stream.getvalue() == ""


def test_spinner_dot_counter_wraps(plain):
    spinner = StreamingSpinner("Working", io.StringIO())
    for _ in range(3):
        spinner.update()
    assert spinner.dots == 3
    spinner.update()
    assert spinner.dots == 0


def test_spinner_color_uses_marks(color):
    stream = io.StringIO()
    spinner = StreamingSpinner("Working", stream)
    spinner.update()
    assert "Working" in stream.getvalue()
    assert "●" in stream.getvalue()


def test_animated_message_plain(plain):
    writer = io.StringIO()
    anim = AnimatedMessage("loading", writer)
    anim.start()
    time.sleep(0.35)
    anim.stop()
    out = writer.getvalue()
    assert "\r| loading" in out
    assert out.endswith("\r")


def test_animated_message_stop_without_start(plain):
    writer = io.StringIO()
    AnimatedMessage("loading", writer).stop()
    assert writer.getvalue() == ""


def test_animated_message_frames_follow_mode(plain, monkeypatch):
    assert AnimatedMessage("x", io.StringIO()).frames[0] == "|"
    monkeypatch.delenv("NO_COLOR")
    assert AnimatedMessage("x", io.StringIO()).frames[0] == "⠋"


def test_progress_bar_counts(plain):
    bar = new_progress_bar(10, "Working")
    try:
        assert bar.total == 10
        assert "Working" in bar.desc
        bar.update(3)
        assert bar.n == 3
    finally:
        bar.close()


def test_progress_bar_color(color):
    bar = new_progress_bar(4, "Working")
    try:
        assert bar.total == 4
        assert "Working" in bar.desc
    finally:
        bar.close()


@pytest.mark.parametrize(
    "func, mark",
    [(show_success, "✓"), (show_error, "✗"), (show_warning, "⚠"), (show_info, "ℹ")],
)
def test_show_plain(plain, capsys, func, mark):
    func("done")
    assert capsys.readouterr().out == f"{mark} done\n"


@pytest.mark.parametrize("func", [show_success, show_error, show_warning, show_info])
def test_show_color(color, capsys, func):
    func("done")
    out = capsys.readouterr().out
    assert "done" in out
    assert out.endswith("\n")