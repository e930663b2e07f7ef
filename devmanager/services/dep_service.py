"""依赖服务 — 配置中的依赖清单 + 本地安装状态"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devmanager.core.config import ConfigStore
from devmanager.core.dep_manager import DepManager, Downloader
from devmanager.core.exceptions import ConfigError, NotFoundError
from devmanager.core.models import Config, Dependency

logger = logging.getLogger(__name__)


@dataclass
class DepStatus:
    dep: Dependency
    installed: bool
    path: Path


class DepService:
    """依赖的增删与安装"""

    def __init__(
        self,
        store: ConfigStore,
        config: Config,
        downloader: Downloader | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._downloader = downloader

    @property
    def manager(self) -> DepManager:
        if not self._config.workspace_path:
            raise ConfigError("workspacePath 未设置，请先执行 init")
        return DepManager(
            Path(self._config.workspace_path) / "deps",
            downloader=self._downloader,
        )

    def list_all(self) -> list[DepStatus]:
        dm = self.manager
        return [
            DepStatus(dep=d, installed=dm.is_installed(d), path=dm.install_path(d))
            for d in self._config.dependencies
        ]

    def get(self, name: str) -> Dependency:
        dep = self._config.find_dependency(name)
        if dep is None:
            raise NotFoundError(f"依赖不在配置中: {name}")
        return dep

    def add(self, name: str, *, version: str = "", source: str = "") -> Dependency:
        dep = self._config.add_dependency(name, version=version, source=source)
        self._store.save(self._config)
        logger.info("依赖已添加: %s@%s", name, version or "-")
        return dep

    def install(self, name: str, *, force: bool = False) -> Path:
        dep = self.get(name)
        path = self.manager.install(dep, force=force)
        dep.path = str(path)
        self._store.save(self._config)
        return path

    def install_all(self, *, force: bool = False) -> dict[str, Path | str]:
        results = self.manager.install_all(self._config.dependencies, force=force)
        changed = False
        for dep in self._config.dependencies:
            result = results.get(dep.name)
            if isinstance(result, Path) and dep.path != str(result):
                dep.path = str(result)
                changed = True
        if changed:
            self._store.save(self._config)
        return results

    def remove(self, name: str) -> Dependency:
        """从配置移除并卸载本地文件"""
        dep = self._config.remove_dependency(name)
        self._store.save(self._config)
        uninstalled = bool(self._config.workspace_path) and self.manager.remove(dep)
        logger.info("依赖已移除: %s (卸载本地文件=%s)", name, uninstalled)
        return dep
