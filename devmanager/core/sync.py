"""批量同步 — 按配置顺序逐个同步受管仓库

仓库之间相互独立：单个失败只记录日志和结果，继续处理下一个。
工作区不干净时是否跳过属于调用方策略（skip_dirty），驱动本身不做判断。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from devmanager.core.exceptions import DevManagerError
from devmanager.core.git_repo import SYNC_CLONED, SYNC_UPDATED, GitRepo
from devmanager.core.models import Repository
from devmanager.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)

STATUS_CLONED = SYNC_CLONED
STATUS_UPDATED = SYNC_UPDATED
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass
class SyncResult:
    """单个仓库的同步结果"""

    name: str
    status: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (STATUS_CLONED, STATUS_UPDATED)


@dataclass
class SyncReport:
    """批量同步汇总"""

    results: list[SyncResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[SyncResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if r.status == STATUS_FAILED]

    @property
    def skipped(self) -> list[SyncResult]:
        return [r for r in self.results if r.status == STATUS_SKIPPED]

    @property
    def success(self) -> bool:
        return not self.failed


def sync_repository(
    repo: Repository,
    executor: CommandExecutor | None = None,
    *,
    skip_dirty: bool = True,
    now: datetime | None = None,
) -> SyncResult:
    """同步单个仓库，异常转为 failed 结果；成功时刷新 last_sync"""
    try:
        driver = GitRepo.from_repository(repo, executor=executor)
        if skip_dirty and driver.exists() and not driver.is_clean():
            logger.warning("跳过 %s: 工作区有未提交的变更", repo.name)
            return SyncResult(repo.name, STATUS_SKIPPED, "工作区有未提交的变更")
        action = driver.sync()
    except DevManagerError as e:
        logger.error("同步失败 %s: %s", repo.name, e)
        return SyncResult(repo.name, STATUS_FAILED, str(e))

    repo.last_sync = now or datetime.now(timezone.utc)
    logger.info("同步完成 %s (%s)", repo.name, action)
    return SyncResult(repo.name, action)


def sync_repositories(
    repos: list[Repository],
    executor: CommandExecutor | None = None,
    *,
    skip_dirty: bool = True,
) -> SyncReport:
    """按顺序同步全部仓库，不因单个失败中断"""
    report = SyncReport()
    now = datetime.now(timezone.utc)
    for repo in repos:
        report.results.append(
            sync_repository(repo, executor, skip_dirty=skip_dirty, now=now),
        )
    logger.info(
        "批量同步结束: 成功 %d, 跳过 %d, 失败 %d",
        len(report.succeeded), len(report.skipped), len(report.failed),
    )
    return report
