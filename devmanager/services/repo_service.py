"""仓库服务 — 受管仓库的增删查与同步

所有变更先在内存 Config 上完成，成功后整体写回配置文件；
校验失败（如重名）时不写文件。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from devmanager.core.config import ConfigStore
from devmanager.core.exceptions import NotFoundError
from devmanager.core.git_repo import GitRepo
from devmanager.core.models import Config, Repository
from devmanager.core.sync import SyncReport, sync_repositories
from devmanager.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class RepoService:
    """受管仓库生命周期管理"""

    def __init__(
        self,
        store: ConfigStore,
        config: Config,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._executor = executor

    # ---- CRUD ----

    def list_all(self) -> list[Repository]:
        return list(self._config.repositories)

    def get(self, name: str) -> Repository:
        repo = self._config.find_repository(name)
        if repo is None:
            raise NotFoundError(f"仓库未受管理: {name}")
        return repo

    def add(self, name: str, url: str, *, branch: str = "", path: str = "") -> Repository:
        """注册仓库并写回配置；重名抛 ValidationError 且不写文件"""
        repo = self._config.add_repository(name, url, branch=branch, path=path)
        self._store.save(self._config)
        logger.info("仓库已添加: %s (%s) -> %s", name, url, repo.path)
        return repo

    def remove(self, name: str, *, delete_dir: bool = False) -> Repository:
        """移除仓库；delete_dir=True 时同时删除本地目录"""
        repo = self._config.remove_repository(name)
        self._store.save(self._config)
        logger.info("仓库已移除: %s", name)
        if delete_dir and Path(repo.path).exists():
            shutil.rmtree(repo.path)
            logger.info("已删除仓库目录: %s", repo.path)
        return repo

    # ---- Git ----

    def driver(self, name: str) -> GitRepo:
        return GitRepo.from_repository(self.get(name), executor=self._executor)

    def clone(self, name: str) -> Repository:
        """立即克隆仓库（添加后可选执行）"""
        self.driver(name).clone()
        return self.get(name)

    def sync(self, name: str | None = None, *, skip_dirty: bool = True) -> SyncReport:
        """同步单个或全部仓库，刷新成功项的 lastSync 并写回配置"""
        repos = [self.get(name)] if name else self.list_all()
        report = sync_repositories(repos, self._executor, skip_dirty=skip_dirty)
        if report.succeeded:
            self._store.save(self._config)
        return report
