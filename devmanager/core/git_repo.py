"""单个仓库的 Git 操作 — 克隆 / 拉取变基 / 工作区检查

状态只有两种，由本地路径是否存在决定（不持久化标记）:
  - Absent:  路径不存在 → sync() 执行 clone
  - Present: 路径存在   → sync() 执行 fetch + rebase origin/<branch>

所有 git 调用经由注入的 CommandExecutor，非零退出码包装为带输出的类型化异常。
不做重试，失败一次即上报给调用方。
"""

from __future__ import annotations

import logging
from pathlib import Path

from devmanager.core.exceptions import CloneError, SyncError
from devmanager.core.models import DEFAULT_BRANCH, Repository
from devmanager.utils.shell import CommandExecutor, CommandResult, LocalExecutor

logger = logging.getLogger(__name__)

SYNC_CLONED = "cloned"
SYNC_UPDATED = "updated"


class GitRepo:
    """单个受管仓库的 Git 驱动"""

    def __init__(
        self,
        path: str | Path,
        url: str,
        branch: str = "",
        executor: CommandExecutor | None = None,
    ) -> None:
        if not str(path):
            raise CloneError(f"仓库路径为空: {url}")
        self.path = Path(path)
        self.url = url
        self.branch = branch or DEFAULT_BRANCH
        self._executor = executor or LocalExecutor()

    @classmethod
    def from_repository(
        cls, repo: Repository, executor: CommandExecutor | None = None,
    ) -> GitRepo:
        return cls(repo.path, repo.url, repo.branch, executor=executor)

    def exists(self) -> bool:
        return self.path.exists()

    def sync(self) -> str:
        """按路径是否存在选择 clone 或 fetch+rebase，返回执行的动作"""
        if not self.exists():
            self.clone()
            return SYNC_CLONED
        self.update()
        return SYNC_UPDATED

    def clone(self) -> None:
        """git clone -b <branch> <url> <path>"""
        if self.exists():
            raise CloneError(f"目标路径已存在: {self.path}")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CloneError(f"无法创建目录 {self.path.parent}: {e}") from e

        logger.info("克隆 %s (%s) -> %s", self.url, self.branch, self.path)
        r = self._executor.execute(
            ["git", "clone", "-b", self.branch, self.url, str(self.path)],
        )
        if not r.success:
            raise CloneError(
                f"git clone 失败 (rc={r.returncode})",
                output=r.output, returncode=r.returncode,
            )

    def update(self) -> None:
        """git fetch origin <branch> 后 git rebase origin/<branch>

        fetch 失败时不会尝试 rebase。
        """
        logger.info("更新 %s (%s)", self.path, self.branch)
        r = self._git("fetch", "origin", self.branch)
        if not r.success:
            raise SyncError(
                f"git fetch 失败 (rc={r.returncode})，无法获取远端更新",
                stage=SyncError.STAGE_FETCH,
                output=r.output, returncode=r.returncode,
            )

        r = self._git("rebase", f"origin/{self.branch}")
        if not r.success:
            raise SyncError(
                f"git rebase 失败 (rc={r.returncode})，本地变更与远端冲突",
                stage=SyncError.STAGE_REBASE,
                output=r.output, returncode=r.returncode,
            )

    def is_clean(self) -> bool:
        """工作区无未提交变更（git status --porcelain 输出为空）"""
        r = self._git("status", "--porcelain")
        if not r.success:
            raise SyncError(
                f"git status 失败 (rc={r.returncode})",
                stage=SyncError.STAGE_STATUS,
                output=r.output, returncode=r.returncode,
            )
        return r.stdout.strip() == ""

    def _git(self, *args: str) -> CommandResult:
        return self._executor.execute(["git", "-C", str(self.path), *args])
