import io
import json
import subprocess

import pytest
import responses

from smartcommit.config import Settings
from smartcommit.ollama_client import OllamaError
from smartcommit.smart_commit import (
    CommandError,
    ask_confirmation,
    generate_text,
    run_shell_command,
    run_smart_commit,
)

BASE = "http://ollama.test"


def _settings():
    return Settings(ollama_host=BASE, model="test-model", temperature=0.3)


def _git(*args, cwd):
    return subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True)


def _mock_ollama(rsps, chunks, status=200):
    rsps.add(responses.GET, f"{BASE}/api/tags", json={"models": []}, status=200)
    body = "".join(
        json.dumps({"message": {"role": "assistant", "content": text}, "done": i == len(chunks) - 1})
        + "\n"
        for i, text in enumerate(chunks)
    )
    rsps.add(responses.POST, f"{BASE}/api/chat", body=body, status=status)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    monkeypatch.setenv("NO_COLOR", "1")
    for name in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{name}_NAME", "Tester")
        monkeypatch.setenv(f"GIT_{name}_EMAIL", "tester@example.com")
    return tmp_path


@pytest.fixture
def repo(workdir):
    _git("init", "-q", cwd=workdir)
    return workdir


@pytest.fixture
def staged_repo(repo):
    (repo / "hello.txt").write_text("hello\n")
    _git("add", "hello.txt", cwd=repo)
    return repo


def test_not_a_git_repository(workdir):
    with pytest.raises(CommandError, match="not inside a Git repository"):
        run_smart_commit(_settings(), False, True, 500)


def test_no_staged_changes(repo):
    with pytest.raises(CommandError, match="no staged changes found"):
        run_smart_commit(_settings(), False, True, 500)


def test_dry_run_returns_sanitized_message(staged_repo, capsys):
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ['"Add greeting', ' to hello.txt"'])
        message = run_smart_commit(_settings(), False, True, 500)
    assert message == "Add greeting to hello.txt"
    out = capsys.readouterr().out
    assert "Dry run mode - not committing" in out
    assert _git("rev-parse", "HEAD", cwd=staged_repo).returncode != 0


def test_prompt_contains_diff_and_rules(staged_repo):
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ["Add hello.txt"])
        message = run_smart_commit(_settings(), False, True, 500)
        body = json.loads(rsps.calls[1].request.body)
    assert message == "Add hello.txt"
    assert body["model"] == "test-model"
    assert body["stream"] is True
    user = body["messages"][1]["content"]
    assert "hello.txt" in user
    assert "Use imperative mood" in user


def test_auto_commit_creates_commit(staged_repo):
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ["Add hello.txt with greeting"])
        message = run_smart_commit(_settings(), True, False, 500)
    log = _git("log", "-1", "--pretty=%s", cwd=staged_repo)
    assert log.stdout.strip() == message


def test_declined_confirmation_does_not_commit(staged_repo, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("n\n"))
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ["Add hello.txt"])
        run_smart_commit(_settings(), False, False, 500)
    assert "Commit cancelled" in capsys.readouterr().out
    assert _git("rev-parse", "HEAD", cwd=staged_repo).returncode != 0


def test_chat_failure_is_reported(staged_repo):
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ["ignored"], status=400)
        with pytest.raises(CommandError, match="status 400"):
            run_smart_commit(_settings(), False, True, 500)


def test_generate_text_joins_chunks(workdir):
    with responses.RequestsMock() as rsps:
        _mock_ollama(rsps, ["Hello", " world!"])
        assert generate_text(_settings(), "sys", "usr", "Working") == "Hello world!"


def test_generate_text_ping_failure(workdir):
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, f"{BASE}/api/tags", status=500)
        with pytest.raises(CommandError, match="ping"):
            generate_text(_settings(), "sys", "usr", "Working")


def test_generate_text_stream_error(workdir):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/api/tags", json={}, status=200)
        rsps.add(responses.POST, f"{BASE}/api/chat", body="not json\n", status=200)
        with pytest.raises(OllamaError, match="unmarshal"):
            generate_text(_settings(), "sys", "usr", "Working")


@pytest.mark.parametrize("answer,expected", [("y\n", True), ("YES\n", True), ("n\n", False), ("\n", False)])
def test_ask_confirmation(monkeypatch, answer, expected):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr("sys.stdin", io.StringIO(answer))
    assert ask_confirmation("Continue? ") is expected


def test_ask_confirmation_eof(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    with pytest.raises(CommandError, match="EOF"):
        ask_confirmation("Continue? ")


def test_run_shell_command_runs(tmp_path):
    target = tmp_path / "made.txt"
    run_shell_command(f"touch '{target}'")
    assert target.exists()


def test_run_shell_command_failure():
    with pytest.raises(CommandError, match="exit status 3"):
        run_shell_command("exit 3")