"""ServiceContainer 单元测试"""

from __future__ import annotations

from devmanager.core.prompt import ClickPrompter
from devmanager.services.container import ServiceContainer
from devmanager.utils.shell import LocalExecutor


class TestServiceContainer:
    def test_defaults(self, tmp_path) -> None:
        c = ServiceContainer(tmp_path / "c.yaml")
        assert isinstance(c.executor, LocalExecutor)
        assert isinstance(c.prompter, ClickPrompter)
        assert c.ssh.ssh_dir.name == ".ssh"

    def test_services_cached_and_share_config(self, config_file, executor) -> None:
        c = ServiceContainer(config_file, executor=executor)
        assert c.repo is c.repo
        assert c.deps is c.deps
        c.repo.add("api", "git@x:api.git")
        assert c.config_service.config.find_repository("api") is not None

    def test_config_loaded_once(self, config_file) -> None:
        c = ServiceContainer(config_file)
        assert c.config is c.config

    def test_injected_dependencies(self, tmp_path, executor, make_prompter) -> None:
        prompter = make_prompter()
        c = ServiceContainer(tmp_path / "c.yaml", executor=executor, prompter=prompter, home_dir=tmp_path)
        assert c.prompter is prompter
        assert c.ssh.ssh_dir == tmp_path / ".ssh"
        assert c.commit_assistant("/repo") is not c.commit_assistant("/repo")
