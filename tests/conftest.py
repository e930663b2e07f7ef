"""测试公共 fixture：假执行器、预设答案的交互端口、临时配置"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from devmanager.utils.logger import reset_logging
from devmanager.utils.shell import CommandResult


class FakeExecutor:
    """记录全部调用，按命令前缀返回预设结果

    rules 中的 key 为参数元组前缀，value 为 CommandResult 或
    接收 (args, cwd) 并返回 CommandResult 的回调。未命中时返回成功。
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.cwds: list[str | None] = []
        self.interactive: list[bool] = []
        self._rules: list[tuple[tuple[str, ...], object]] = []

    def on(self, *prefix: str, result: object) -> FakeExecutor:
        self._rules.append((prefix, result))
        return self

    def execute(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        self.calls.append(list(args))
        self.cwds.append(cwd)
        self.interactive.append(interactive)
        for prefix, result in reversed(self._rules):
            if tuple(args[: len(prefix)]) == prefix:
                if callable(result):
                    return result(args, cwd)
                return result  # type: ignore[return-value]
        return CommandResult(returncode=0)

    def commands(self, index: int) -> list[str]:
        """返回第 index 个参数位置的值（git -C <path> <sub> 中的子命令为 3）"""
        return [c[index] for c in self.calls if len(c) > index]


class ScriptedPrompter:
    """按队列返回预设答案，队列为空时使用默认值"""

    def __init__(
        self,
        confirms: list[bool] | None = None,
        choices: list[int | None] | None = None,
        answers: list[str] | None = None,
    ) -> None:
        self.confirms = list(confirms or [])
        self.choices = list(choices or [])
        self.answers = list(answers or [])
        self.asked: list[str] = []

    def confirm(self, message: str, *, default: bool = False) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0) if self.confirms else default

    def choose(self, message: str, options: list[str]) -> int | None:
        self.asked.append(message)
        return self.choices.pop(0) if self.choices else None

    def ask(self, message: str, *, default: str = "") -> str:
        self.asked.append(message)
        return self.answers.pop(0) if self.answers else default


def clone_creates_dir(args: list[str], cwd: str | None) -> CommandResult:
    """模拟成功的 git clone：创建目标目录"""
    Path(args[-1]).mkdir(parents=True, exist_ok=True)
    return CommandResult(returncode=0, stdout="Cloning...\n")


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture()
def executor() -> FakeExecutor:
    return FakeExecutor().on("git", "clone", result=clone_creates_dir)


@pytest.fixture()
def make_prompter() -> Callable[..., ScriptedPrompter]:
    return ScriptedPrompter


@pytest.fixture()
def config_file(tmp_path) -> Path:
    """带一个工作目录和合法同步周期的最小配置"""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"workspacePath: {tmp_path / 'ws'}\n"
        "updateFrequency: 2h\n"
        "repositories: []\n"
        "tools: []\n"
        "dependencies: []\n",
        encoding="utf-8",
    )
    return path
