"""Integration tests for the host hook handlers."""

import io
import json

import pytest

from skill_activation.config import ActivationConfig
from skill_activation.hooks import (
    EXIT_BLOCK,
    EXIT_OK,
    edit_hook,
    prompt_hook,
    read_hook_input,
    stop_hook,
)


def _stdin(payload) -> io.StringIO:
    return io.StringIO(payload if isinstance(payload, str) else json.dumps(payload))


def _edit(tool_name: str, file_path: str, session_id: str = "s1") -> io.StringIO:
    return _stdin({
        "session_id": session_id,
        "tool_name": tool_name,
        "tool_input": {"file_path": file_path},
    })


class TestReadHookInput:
    """Tests for read_hook_input()."""

    def test_valid_json(self):
        assert read_hook_input(_stdin({"prompt": "hi"})) == {"prompt": "hi"}

    @pytest.mark.parametrize("raw", ["", "{ nope", "[1, 2]"])
    def test_invalid_input_is_empty(self, raw):
        assert read_hook_input(_stdin(raw)) == {}


class TestPromptHook:
    """Tests for prompt_hook()."""

    def test_suggestions_printed_to_stdout(self, config: ActivationConfig):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = prompt_hook(_stdin({"prompt": "update the user model"}), stdout, stderr, env={}, config=config)

        assert code == EXIT_OK
        assert "rails-dev-guidelines" in stdout.getvalue()
        assert stderr.getvalue() == ""

    def test_no_match_prints_nothing(self, config: ActivationConfig):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = prompt_hook(_stdin({"prompt": "hello there"}), stdout, stderr, env={}, config=config)

        assert code == EXIT_OK
        assert stdout.getvalue() == ""

    def test_blocking_rule_exits_2(self, config: ActivationConfig):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = prompt_hook(_stdin({"prompt": "add a migration"}), stdout, stderr, env={}, config=config)

        assert code == EXIT_BLOCK
        assert "database-migrations" in stderr.getvalue()
        assert stdout.getvalue() == ""

    def test_acknowledged_through_env(self, config: ActivationConfig):
        stdout, stderr = io.StringIO(), io.StringIO()
        env = {"SKILL_ACTIVATION_ACK": "database-migrations"}
        code = prompt_hook(_stdin({"prompt": "add a migration"}), stdout, stderr, env=env, config=config)

        assert code == EXIT_OK
        assert "database-migrations" in stdout.getvalue()

    def test_block_is_shown_once_per_session(self, config: ActivationConfig):
        payload = {"session_id": "s1", "prompt": "add a migration"}
        codes = []
        for _ in range(3):
            codes.append(prompt_hook(_stdin(payload), io.StringIO(), io.StringIO(), env={}, config=config))

        assert codes == [EXIT_BLOCK, EXIT_OK, EXIT_OK]
        assert (config.session_path / "s1.jsonl").exists()

    def test_shown_block_still_suggested(self, config: ActivationConfig):
        payload = {"session_id": "s1", "prompt": "add a migration"}
        prompt_hook(_stdin(payload), io.StringIO(), io.StringIO(), env={}, config=config)

        stdout = io.StringIO()
        prompt_hook(_stdin(payload), stdout, io.StringIO(), env={}, config=config)
        assert "database-migrations" in stdout.getvalue()

    def test_block_acknowledgment_is_per_session(self, config: ActivationConfig):
        prompt_hook(_stdin({"session_id": "a", "prompt": "add a migration"}),
                    io.StringIO(), io.StringIO(), env={}, config=config)

        code = prompt_hook(_stdin({"session_id": "b", "prompt": "add a migration"}),
                           io.StringIO(), io.StringIO(), env={}, config=config)
        assert code == EXIT_BLOCK

    @pytest.mark.parametrize("payload", ["{ nope", {}, {"prompt": "   "}, {"prompt": 42}])
    def test_bad_input_exits_0(self, config: ActivationConfig, payload):
        stdout, stderr = io.StringIO(), io.StringIO()
        assert prompt_hook(_stdin(payload), stdout, stderr, env={}, config=config) == EXIT_OK
        assert stdout.getvalue() == ""

    def test_missing_rules_file_exits_0(self, config: ActivationConfig, tmp_path):
        config.rules_path = str(tmp_path / "missing.json")
        stdout, stderr = io.StringIO(), io.StringIO()

        assert prompt_hook(_stdin({"prompt": "add a migration"}), stdout, stderr, env={}, config=config) == EXIT_OK
        assert stdout.getvalue() == ""


class TestEditHook:
    """Tests for edit_hook()."""

    def test_write_prints_checks(self, config: ActivationConfig):
        stdout = io.StringIO()
        code = edit_hook(_edit("Write", "app/models/user.rb"), stdout, env={}, config=config)

        assert code == EXIT_OK
        assert "FOLLOW-UP CHECKS DUE:" in stdout.getvalue()
        assert "run-model-specs" in stdout.getvalue()

    def test_read_is_ignored(self, config: ActivationConfig):
        stdout = io.StringIO()
        assert edit_hook(_edit("Read", "app/models/user.rb"), stdout, env={}, config=config) == EXIT_OK
        assert stdout.getvalue() == ""

    def test_unknown_tool_is_ignored(self, config: ActivationConfig):
        stdout = io.StringIO()
        assert edit_hook(_edit("Bash", "app/models/user.rb"), stdout, env={}, config=config) == EXIT_OK
        assert stdout.getvalue() == ""

    @pytest.mark.parametrize("tool_input", [None, "oops", {}, {"file_path": ""}])
    def test_missing_file_path(self, config: ActivationConfig, tool_input):
        stdout = io.StringIO()
        stdin = _stdin({"session_id": "s1", "tool_name": "Edit", "tool_input": tool_input})

        assert edit_hook(stdin, stdout, env={}, config=config) == EXIT_OK
        assert stdout.getvalue() == ""

    def test_notebook_path(self, config: ActivationConfig):
        stdout = io.StringIO()
        stdin = _stdin({
            "session_id": "s1",
            "tool_name": "NotebookEdit",
            "tool_input": {"notebook_path": "spec/models/user_spec.rb"},
        })

        edit_hook(stdin, stdout, env={}, config=config)
        assert "run-tests" in stdout.getvalue()

    def test_corrupt_session_file_still_records(self, config: ActivationConfig):
        config.session_path.mkdir(parents=True)
        (config.session_path / "s1.jsonl").write_bytes(b"\xff\xfe garbage\n")

        stdout = io.StringIO()
        assert edit_hook(_edit("Edit", "app/models/user.rb"), stdout, env={}, config=config) == EXIT_OK
        assert "run-model-specs" in stdout.getvalue()

    def test_session_id_from_env(self, config: ActivationConfig):
        stdin = _stdin({"tool_name": "Edit", "tool_input": {"file_path": "app/models/user.rb"}})
        edit_hook(stdin, io.StringIO(), env={"CLAUDE_SESSION_ID": "from-env"}, config=config)

        assert (config.session_path / "from-env.jsonl").exists()


class TestStopHook:
    """Tests for stop_hook() across separate hook invocations."""

    def test_outstanding_checks_printed_at_stop(self, config: ActivationConfig):
        config.check_threshold = 10
        for path in ("app/models/user.rb", "db/migrate/001_create_users.rb"):
            stdout = io.StringIO()
            edit_hook(_edit("Edit", path), stdout, env={}, config=config)
            assert stdout.getvalue() == ""

        stdout = io.StringIO()
        assert stop_hook(_stdin({"session_id": "s1"}), stdout, env={}, config=config) == EXIT_OK
        assert "run-model-specs" in stdout.getvalue()
        assert "db-migrate-check" in stdout.getvalue()
        assert "app/models/user.rb" in stdout.getvalue()

        again = io.StringIO()
        stop_hook(_stdin({"session_id": "s1"}), again, env={}, config=config)
        assert again.getvalue() == ""

    def test_nothing_outstanding(self, config: ActivationConfig):
        edit_hook(_edit("Edit", "app/models/user.rb"), io.StringIO(), env={}, config=config)

        stdout = io.StringIO()
        stop_hook(_stdin({"session_id": "s1"}), stdout, env={}, config=config)
        assert stdout.getvalue() == ""

    def test_other_session_is_untouched(self, config: ActivationConfig):
        config.check_threshold = 10
        edit_hook(_edit("Edit", "app/models/user.rb", session_id="a"), io.StringIO(), env={}, config=config)

        stdout = io.StringIO()
        stop_hook(_stdin({"session_id": "b"}), stdout, env={}, config=config)
        assert stdout.getvalue() == ""
