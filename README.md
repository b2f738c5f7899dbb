# smartcommit

A Python library that uses a local Ollama server to help with everyday Git
work. It writes commit messages from staged changes, reviews a diff and
returns ranked improvement suggestions, and turns a plain-language task into
one shell command. Your code is sent only to the Ollama server you point it
at.

## Installation

```
pip install .
```

You need `git` on your `PATH` and a running Ollama server with a model
pulled, for example `ollama pull llama3.1:8b`. The shell commands are run
with `sh -c`.

## Settings

`smartcommit.config.load_settings(config_file=None, overrides=None)` returns a
`Settings` object with `ollama_host` (default `127.0.0.1:11434`), `model`
(default `llama3.1:8b`), `temperature` (default `0.3`) and `verbose`
(default `False`). Values are taken, in order of precedence, from
`overrides`, the environment, a YAML config file and the defaults.

Without `config_file` the file is looked for in `~/.config` as
`gh-smart-commit` with a `.json`, `.yaml` or `.yml` suffix or none:

```yaml
ollama:
  host: 127.0.0.1:11434
  model: llama3.1:8b
  temperature: 0.3
verbose: false
```

Environment variables are named `GH_SMART_COMMIT_` followed by the upper-cased
key, for example `GH_SMART_COMMIT_VERBOSE`. `Settings.ollama_url` gives the host
with `http://` added when it does not already start with `http`.

## Commands

Each command works on the Git repository in the current directory, prints
its output to the terminal and raises `smartcommit.smart_commit.CommandError`
when it cannot finish.

```python
from smartcommit.config import load_settings
from smartcommit.smart_commit import run_smart_commit
from smartcommit.lint_suggestions import run_lint_suggestions
from smartcommit.bash import run_bash

settings = load_settings(overrides={"verbose": True})

message = run_smart_commit(settings, dry_run=True)
suggestions = run_lint_suggestions(settings, severity="high", max_suggestions=5)
command = run_bash(settings, "find files larger than 10MB", dry_run=True)
```

- `run_smart_commit(settings, auto_commit=False, dry_run=False, max_diff_lines=500)`
  reads the staged diff, asks the model for a commit message, shows it and,
  after you answer `y` or `yes`, runs `git commit`. It returns the message.
- `run_lint_suggestions(settings, staged=True, unstaged=False, severity="all", max_suggestions=10)`
  reviews the staged changes, or the unstaged ones when `staged` is false,
  and returns the `Suggestion` objects it displayed. `severity` is `all`,
  `high`, `medium` or `low`.
- `run_bash(settings, description, dry_run=False, auto_execute=False)` builds
  a prompt from the task, the operating system, the working directory, its
  top-level entries and the Git state, shows the generated command and runs
  it after confirmation. It returns the command.

## Building blocks

- `smartcommit.gitrepo.LocalRepo` wraps the `git` command: staged and unstaged
  diffs, current branch, repository name and recent commits with file
  statistics. `truncate_diff` and `parse_git_stats` are available on their own.
- `smartcommit.ollama_client.OllamaClient` talks to `/api/chat` and
  `/api/tags`; `chat()` yields `ChatResponse` chunks and retries server
  errors with back-off.
- `smartcommit.prompt.PromptBuilder` renders Jinja templates for
  `smart-commit`, `lint-suggestions`, `branch-describe`, `bash` and
  `tag-suggest`; `add_template()` registers more. `sanitize_commit_message`,
  `sanitize_bash_command` and `validate_commit_message` clean up and check
  model output.
- `smartcommit.cache.Cache` stores expiring string values as JSON files under
  `.git/gh-smart-commit-cache`.
- `smartcommit.formatter`, `smartcommit.progress` and `smartcommit.styles`
  render the terminal output.

Set `NO_COLOR` to any value to get plain, uncoloured output.

## What it does not do

- It installs no command-line program; the commands are Python functions to
  call from your own code.
- It does not summarise a branch's work: the `branch-describe` prompt, the
  commit history helpers and the cache are present, but no function sends
  them to the model.
- Likewise no function uses the `tag-suggest` prompt.