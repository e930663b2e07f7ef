"""SSHManager 单元测试（假执行器 + 临时 HOME）"""

from __future__ import annotations

import pytest

from devmanager.core.exceptions import NotFoundError, SSHError
from devmanager.core.ssh_manager import SSHManager
from devmanager.utils.shell import CommandResult


def _write_key(ssh_dir, name: str, pub: bool = True) -> None:
    ssh_dir.mkdir(parents=True, exist_ok=True)
    (ssh_dir / name).write_text("PRIVATE", encoding="utf-8")
    if pub:
        (ssh_dir / f"{name}.pub").write_text(f"ssh-ed25519 AAAA {name}\n", encoding="utf-8")


class TestKeys:
    def test_key_path_naming(self, tmp_path) -> None:
        ssh = SSHManager(tmp_path)
        assert ssh.key_path("ed25519").name == "id_ed25519"
        assert ssh.key_path("rsa", "work").name == "work_id_rsa"

    def test_list_private_keys(self, tmp_path) -> None:
        ssh = SSHManager(tmp_path)
        _write_key(ssh.ssh_dir, "id_rsa", pub=False)
        _write_key(ssh.ssh_dir, "work_id_ed25519")
        (ssh.ssh_dir / "known_hosts").write_text("", encoding="utf-8")
        assert [k.name for k in ssh.list_private_keys()] == ["id_rsa", "work_id_ed25519"]

    def test_list_without_ssh_dir(self, tmp_path) -> None:
        assert SSHManager(tmp_path).list_private_keys() == []

    def test_generate(self, tmp_path, executor) -> None:
        ssh = SSHManager(tmp_path, executor=executor)
        key = ssh.generate_key("ed25519", "work")
        assert key == tmp_path / ".ssh" / "work_id_ed25519"
        assert executor.calls == [["ssh-keygen", "-t", "ed25519", "-f", str(key), "-N", ""]]
        assert (tmp_path / ".ssh").is_dir()

    def test_generate_existing(self, tmp_path, executor) -> None:
        ssh = SSHManager(tmp_path, executor=executor)
        _write_key(ssh.ssh_dir, "id_ed25519")
        with pytest.raises(SSHError, match="已存在"):
            ssh.generate_key()
        assert executor.calls == []

    def test_generate_unsupported_algo(self, tmp_path, executor) -> None:
        with pytest.raises(SSHError, match="不支持的算法"):
            SSHManager(tmp_path, executor=executor).generate_key("dsa")

    def test_generate_failure(self, tmp_path, executor) -> None:
        executor.on("ssh-keygen", result=CommandResult(1, stderr="bad"))
        with pytest.raises(SSHError, match="ssh-keygen 失败"):
            SSHManager(tmp_path, executor=executor).generate_key()

    def test_read_public_key(self, tmp_path) -> None:
        ssh = SSHManager(tmp_path)
        _write_key(ssh.ssh_dir, "id_ed25519")
        assert ssh.read_public_key(ssh.ssh_dir / "id_ed25519") == "ssh-ed25519 AAAA id_ed25519"

    def test_read_public_key_missing(self, tmp_path) -> None:
        with pytest.raises(NotFoundError, match="公钥不存在"):
            SSHManager(tmp_path).read_public_key(tmp_path / "nope")

    def test_remove_key(self, tmp_path, executor) -> None:
        executor.on("ssh-add", "-d", result=CommandResult(1, stderr="not loaded"))
        ssh = SSHManager(tmp_path, executor=executor)
        _write_key(ssh.ssh_dir, "id_ed25519")
        key = ssh.ssh_dir / "id_ed25519"
        removed = ssh.remove_key(key)
        assert removed == [key, ssh.ssh_dir / "id_ed25519.pub"]
        assert not key.exists()

    def test_remove_missing_key(self, tmp_path, executor) -> None:
        with pytest.raises(NotFoundError):
            SSHManager(tmp_path, executor=executor).remove_key(tmp_path / "nope")


class TestAgent:
    def test_agent_running(self, monkeypatch) -> None:
        monkeypatch.setenv("SSH_AUTH_SOCK", "/tmp/agent.sock")
        assert SSHManager.is_agent_running()
        monkeypatch.delenv("SSH_AUTH_SOCK")
        assert not SSHManager.is_agent_running()

    def test_list_agent_keys(self, tmp_path, executor) -> None:
        executor.on("ssh-add", "-l", result=CommandResult(0, stdout="256 SHA256:abc me (ED25519)\n\n"))
        assert SSHManager(tmp_path, executor=executor).list_agent_keys() == [
            "256 SHA256:abc me (ED25519)",
        ]

    def test_agent_without_identities(self, tmp_path, executor) -> None:
        executor.on("ssh-add", "-l", result=CommandResult(1, stdout="The agent has no identities."))
        assert SSHManager(tmp_path, executor=executor).list_agent_keys() == []

    def test_agent_unreachable(self, tmp_path, executor) -> None:
        executor.on("ssh-add", "-l", result=CommandResult(2, stderr="Could not open a connection"))
        with pytest.raises(SSHError):
            SSHManager(tmp_path, executor=executor).list_agent_keys()

    def test_add_key_is_interactive(self, tmp_path, executor) -> None:
        SSHManager(tmp_path, executor=executor).add_key_to_agent("/k/id_rsa")
        assert executor.calls == [["ssh-add", "/k/id_rsa"]]
        assert executor.interactive == [True]

    def test_add_key_failure(self, tmp_path, executor) -> None:
        executor.on("ssh-add", result=CommandResult(1))
        with pytest.raises(SSHError, match="ssh-add 失败"):
            SSHManager(tmp_path, executor=executor).add_key_to_agent("/k/id_rsa")
