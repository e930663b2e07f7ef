"""PR 审阅助手 — 汇总 PR 评论与改动，由 LLM 给出处理建议

流程:
  1. 未指定 PR 编号时，按当前分支查找打开的 PR，经 Prompter 确认；
     找不到或用户拒绝时手动输入编号
  2. gh pr view <n> --json number 确认 PR 存在
  3. gh pr view <n> --json title,body,comments,reviews,files 取详情
  4. 拼成提示词交给 LLM，返回建议文本

所有 git / gh 调用经由注入的 CommandExecutor。
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from devmanager.core.exceptions import CommandError, NotFoundError, ValidationError
from devmanager.core.llm import ChatClient
from devmanager.core.prompt import Prompter
from devmanager.utils.shell import CommandExecutor, CommandResult, LocalExecutor

logger = logging.getLogger(__name__)

PR_FIELDS = "title,body,comments,reviews,files"

_SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes PR comments and provides actionable "
    "suggestions. Be specific and practical in your recommendations."
)
_USER_PROMPT = """Analyze these PR comments and provide suggestions for addressing them.
For each comment:
1. Summarize the main point
2. Suggest specific code changes if applicable
3. Provide a draft response to the reviewer
4. Categorize the comment (e.g., bug, enhancement, style, etc.)

PR Title: {title}
PR Description: {body}

PR Comments:
{comments}

PR Review Comments:
{reviews}

Changed Files:
{files}"""

ReviewGenerator = Callable[[str], str]


class OpenAIReviewAdvisor:
    """通过 OpenAI 生成审阅建议"""

    def __init__(self, api_key: str = "", model: str = "") -> None:
        self._chat = ChatClient(api_key, model)

    def __call__(self, prompt: str) -> str:
        return self._chat.complete(_SYSTEM_PROMPT, prompt, max_tokens=1000)


def _format_bodies(items: list[dict[str, Any]], label: str) -> str:
    bodies = [str(item.get("body") or "").strip() for item in items]
    return "".join(
        f"{label} {i}:\n{body}\n\n"
        for i, body in enumerate((b for b in bodies if b), start=1)
    )


def build_review_prompt(pr: dict[str, Any]) -> str:
    """由 gh pr view 的 JSON 构建提示词"""
    files = "".join(
        f"{f.get('path', '')}: +{f.get('additions', 0)} -{f.get('deletions', 0)}\n"
        for f in pr.get("files") or []
    )
    return _USER_PROMPT.format(
        title=pr.get("title", ""),
        body=pr.get("body", ""),
        comments=_format_bodies(pr.get("comments") or [], "Comment"),
        reviews=_format_bodies(pr.get("reviews") or [], "Review"),
        files=files,
    )


class PRReviewAssistant:
    """在 cwd 指定的仓库内执行 PR 审阅流程"""

    def __init__(
        self,
        prompter: Prompter,
        executor: CommandExecutor | None = None,
        generator: ReviewGenerator | None = None,
        cwd: str | None = None,
    ) -> None:
        self._prompter = prompter
        self._executor = executor or LocalExecutor()
        self._generator = generator
        self._cwd = cwd

    def run(self, pr_number: int = 0) -> str:
        number = self.resolve_pr(pr_number)
        pr = self.fetch(number)
        generator = self._generator or OpenAIReviewAdvisor()
        return generator(build_review_prompt(pr))

    def resolve_pr(self, pr_number: int = 0) -> int:
        if pr_number > 0:
            return pr_number

        found = self._find_branch_pr()
        if found is not None:
            number, title = found
            if self._prompter.confirm(f"找到 PR #{number}: {title}，使用该 PR？", default=False):
                return number

        raw = self._prompter.ask("请输入 PR 编号")
        if not raw.isdigit() or int(raw) <= 0:
            raise ValidationError(f"无效的 PR 编号: {raw!r}")
        return int(raw)

    def fetch(self, number: int) -> dict[str, Any]:
        if not self._run(["gh", "pr", "view", str(number), "--json", "number"]).success:
            raise NotFoundError(f"PR #{number} 不存在或无权访问")

        r = self._run(["gh", "pr", "view", str(number), "--json", PR_FIELDS])
        if not r.success:
            raise CommandError(
                f"获取 PR #{number} 详情失败 (rc={r.returncode})",
                output=r.output, returncode=r.returncode,
            )
        try:
            data = json.loads(r.stdout)
        except json.JSONDecodeError as e:
            raise CommandError(f"无法解析 PR #{number} 详情: {e}") from e
        if not isinstance(data, dict):
            raise CommandError(f"无法解析 PR #{number} 详情: 顶层不是对象")
        return data

    def _find_branch_pr(self) -> tuple[int, str] | None:
        """当前分支上打开的 PR；查不到时返回 None"""
        r = self._run(["git", "branch", "--show-current"])
        if not r.success:
            raise CommandError(
                f"获取当前分支失败 (rc={r.returncode})",
                output=r.output, returncode=r.returncode,
            )
        branch = r.stdout.strip()
        if not branch:
            return None

        r = self._run([
            "gh", "pr", "list", "--head", branch, "--state", "open",
            "--json", "number,title", "--limit", "1",
        ])
        if not r.success:
            logger.info("查找分支 %s 的 PR 失败: %s", branch, r.output)
            return None
        try:
            prs = json.loads(r.stdout or "[]")
        except json.JSONDecodeError:
            logger.info("gh pr list 输出无法解析: %s", r.stdout)
            return None
        if not isinstance(prs, list) or not prs:
            return None
        return int(prs[0]["number"]), str(prs[0].get("title", ""))

    def _run(self, args: list[str]) -> CommandResult:
        return self._executor.execute(args, cwd=self._cwd)
