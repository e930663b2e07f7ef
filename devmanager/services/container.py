"""服务容器 — 统一依赖注入

每次 CLI 调用创建一个容器，容器内的服务共享同一份已加载的 Config，
保证"一次加载、按需写回"。执行器和交互端口均可注入，测试时替换为 fake。

用法:
    container = ServiceContainer(config_path="~/.config/dev-manager/config.yaml")
    container.repo.add("api", "git@github.com:me/api.git")
    container.repo.sync()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from devmanager.core.config import ConfigStore
from devmanager.core.prompt import ClickPrompter, Prompter
from devmanager.utils.shell import CommandExecutor, LocalExecutor

if TYPE_CHECKING:
    from devmanager.core.commit_assistant import CommitAssistant, MessageGenerator
    from devmanager.core.dep_manager import Downloader
    from devmanager.core.models import Config
    from devmanager.core.pr_review import PRReviewAssistant, ReviewGenerator
    from devmanager.core.ssh_manager import SSHManager
    from devmanager.services.config_service import ConfigService
    from devmanager.services.dep_service import DepService
    from devmanager.services.repo_service import RepoService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config_path: str | Path | None = None,
        *,
        executor: CommandExecutor | None = None,
        prompter: Prompter | None = None,
        downloader: Downloader | None = None,
        message_generator: MessageGenerator | None = None,
        review_generator: ReviewGenerator | None = None,
        home_dir: str | Path | None = None,
    ) -> None:
        self.store = ConfigStore(config_path)
        self.executor = executor or LocalExecutor()
        self.prompter = prompter or ClickPrompter()
        self._downloader = downloader
        self._message_generator = message_generator
        self._review_generator = review_generator
        self._home_dir = home_dir
        self._config: Config | None = None
        self._instances: dict[str, object] = {}

    @property
    def config(self) -> Config:
        """首次访问时从磁盘加载"""
        if self._config is None:
            self._config = self.store.load()
        return self._config

    @property
    def config_service(self) -> ConfigService:
        if "config" not in self._instances:
            from devmanager.services.config_service import ConfigService
            self._instances["config"] = ConfigService(self.store, self.config)
        return self._instances["config"]  # type: ignore[return-value]

    @property
    def repo(self) -> RepoService:
        if "repo" not in self._instances:
            from devmanager.services.repo_service import RepoService
            self._instances["repo"] = RepoService(
                self.store, self.config, executor=self.executor,
            )
        return self._instances["repo"]  # type: ignore[return-value]

    @property
    def deps(self) -> DepService:
        if "deps" not in self._instances:
            from devmanager.services.dep_service import DepService
            self._instances["deps"] = DepService(
                self.store, self.config, downloader=self._downloader,
            )
        return self._instances["deps"]  # type: ignore[return-value]

    @property
    def ssh(self) -> SSHManager:
        if "ssh" not in self._instances:
            from devmanager.core.ssh_manager import SSHManager
            self._instances["ssh"] = SSHManager(
                home_dir=self._home_dir, executor=self.executor,
            )
        return self._instances["ssh"]  # type: ignore[return-value]

    def commit_assistant(self, cwd: str | None = None) -> CommitAssistant:
        from devmanager.core.commit_assistant import CommitAssistant
        return CommitAssistant(
            self.prompter,
            executor=self.executor,
            generator=self._message_generator,
            cwd=cwd,
        )

    def review_assistant(self, cwd: str | None = None) -> PRReviewAssistant:
        from devmanager.core.pr_review import PRReviewAssistant
        return PRReviewAssistant(
            self.prompter,
            executor=self.executor,
            generator=self._review_generator,
            cwd=cwd,
        )
