"""shell.py LocalExecutor 单元测试"""

from __future__ import annotations

import os

from devmanager.utils.shell import CommandResult, LocalExecutor


class TestCommandResult:
    def test_success_and_output(self) -> None:
        r = CommandResult(returncode=0, stdout="a\n", stderr="b\n")
        assert r.success
        assert r.output == "a\nb"

    def test_failure(self) -> None:
        assert not CommandResult(returncode=128).success


class TestLocalExecutor:
    def test_success(self, tmp_path) -> None:
        r = LocalExecutor().execute(["echo", "hello"], cwd=str(tmp_path))
        assert r.returncode == 0
        assert "hello" in r.stdout

    def test_nonzero_exit(self, tmp_path) -> None:
        r = LocalExecutor().execute(["false"], cwd=str(tmp_path))
        assert not r.success

    def test_missing_binary_returns_127(self) -> None:
        r = LocalExecutor().execute(["definitely-not-a-real-binary-xyz"])
        assert r.returncode == 127
        assert r.stderr

    def test_env_passed(self, tmp_path) -> None:
        env = {**os.environ, "MY_TEST_VAR": "42"}
        r = LocalExecutor().execute(["env"], cwd=str(tmp_path), env=env)
        assert "MY_TEST_VAR=42" in r.stdout

    def test_cwd_respected(self, tmp_path) -> None:
        r = LocalExecutor().execute(["pwd"], cwd=str(tmp_path))
        assert os.path.realpath(r.stdout.strip()) == os.path.realpath(str(tmp_path))
