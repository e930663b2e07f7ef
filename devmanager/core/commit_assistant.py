"""提交助手 — 暂存、审阅、LLM 生成提交信息、提交并推送

流程:
  1. git add . 暂存全部变更
  2. 列出变更文件，用户可逐个查看 diff（经 Prompter 交互）
  3. 提交信息: -m 指定 > LLM 生成并确认 > 手动输入
  4. git commit，默认随后 git push

LLM 调用经由 devmanager.core.llm.ChatClient。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from devmanager.core.exceptions import CommandError, DevManagerError
from devmanager.core.llm import ChatClient
from devmanager.core.prompt import Prompter
from devmanager.utils.shell import CommandExecutor, CommandResult, LocalExecutor

logger = logging.getLogger(__name__)

# 超长 diff 截断，避免超出模型上下文
MAX_DIFF_CHARS = 24_000

_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates commit messages. "
    "Be concise and follow conventional commit format."
)
_USER_PROMPT = """Generate a concise and descriptive commit message for the following changes.
Follow conventional commit format (e.g., feat:, fix:, chore:, etc.).
Focus on the main changes and their impact.
Keep the message under 72 characters.

Changes:
{diff}"""

MessageGenerator = Callable[[str], str]


class OpenAIMessageGenerator:
    """通过 OpenAI 生成提交信息"""

    def __init__(self, api_key: str = "", model: str = "") -> None:
        self._chat = ChatClient(api_key, model)

    @property
    def model(self) -> str:
        return self._chat.model

    def __call__(self, diff: str) -> str:
        return self._chat.complete(
            _SYSTEM_PROMPT,
            _USER_PROMPT.format(diff=diff[:MAX_DIFF_CHARS]),
            max_tokens=100,
        )


@dataclass
class CommitOutcome:
    committed: bool
    pushed: bool = False
    message: str = ""


class CommitAssistant:
    """在 cwd 指定的工作区内执行提交流程"""

    def __init__(
        self,
        prompter: Prompter,
        executor: CommandExecutor | None = None,
        generator: MessageGenerator | None = None,
        cwd: str | None = None,
    ) -> None:
        self._prompter = prompter
        self._executor = executor or LocalExecutor()
        self._generator = generator
        self._cwd = cwd

    def run(
        self, *, message: str = "", push: bool = True, use_llm: bool = True,
        show: Callable[[str], None] = print,
    ) -> CommitOutcome:
        self._git("add", ".", what="暂存变更")
        files = self.changed_files()
        if not files:
            raise DevManagerError("没有需要提交的变更")

        self._review(files, show)

        if not message and use_llm:
            generator = self._generator or OpenAIMessageGenerator()
            message = generator(self._git("diff", "--cached", what="读取暂存区 diff").stdout)
            show(f"\n建议的提交信息:\n{message}\n")
            if not self._prompter.confirm("使用该提交信息？", default=False):
                logger.info("用户拒绝了 LLM 生成的提交信息，已中止")
                return CommitOutcome(committed=False, message=message)
        elif not message:
            message = self._prompter.ask("请输入提交信息")
        if not message:
            raise DevManagerError("提交信息不能为空")

        self._git("commit", "-m", message, what="提交")
        if not push:
            return CommitOutcome(committed=True, message=message)
        self._git("push", what="推送")
        return CommitOutcome(committed=True, pushed=True, message=message)

    def changed_files(self) -> list[str]:
        r = self._git("diff", "--cached", "--name-only", what="列出变更文件")
        return [line for line in r.stdout.splitlines() if line.strip()]

    def _review(self, files: list[str], show: Callable[[str], None]) -> None:
        """循环选择文件查看 diff，直接回车结束"""
        while True:
            idx = self._prompter.choose("选择要查看 diff 的文件", files)
            if idx is None:
                return
            diff = self._git("diff", "--cached", "--", files[idx], what="读取文件 diff")
            show(f"\n{files[idx]} 的 diff:\n{diff.stdout}")

    def _git(self, *args: str, what: str) -> CommandResult:
        r = self._executor.execute(["git", *args], cwd=self._cwd)
        if not r.success:
            raise CommandError(f"{what}失败 (rc={r.returncode})", output=r.output, returncode=r.returncode)
        return r
