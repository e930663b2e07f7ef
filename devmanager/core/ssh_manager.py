"""SSH 密钥管理 — ssh-keygen / ssh-add 的薄封装"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from devmanager.core.exceptions import NotFoundError, SSHError
from devmanager.utils.shell import CommandExecutor, LocalExecutor

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("ssh", "ssh-keygen", "ssh-agent")
SUPPORTED_ALGOS = ("ed25519", "rsa", "ecdsa")
_DEFAULT_KEY_NAMES = frozenset(("id_rsa", "id_ed25519", "id_ecdsa", "id_dsa"))


class SSHManager:
    """~/.ssh 下的密钥与 ssh-agent 管理"""

    def __init__(
        self,
        home_dir: str | Path | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.home_dir = Path(home_dir) if home_dir else Path.home()
        self.ssh_dir = self.home_dir / ".ssh"
        self._executor = executor or LocalExecutor()

    def check_tools(self) -> None:
        """检查 ssh 工具链是否在 PATH 中"""
        missing = [t for t in REQUIRED_TOOLS if shutil.which(t) is None]
        if missing:
            raise SSHError(f"PATH 中未找到: {', '.join(missing)}")

    @staticmethod
    def is_agent_running() -> bool:
        return bool(os.getenv("SSH_AUTH_SOCK"))

    def list_private_keys(self) -> list[Path]:
        """列出 ~/.ssh 中的私钥（默认文件名，或存在同名 .pub 的文件）"""
        if not self.ssh_dir.is_dir():
            return []
        keys = []
        for f in sorted(self.ssh_dir.iterdir()):
            if not f.is_file() or f.suffix == ".pub":
                continue
            if f.name in _DEFAULT_KEY_NAMES or f.with_name(f.name + ".pub").exists():
                keys.append(f)
        return keys

    def list_agent_keys(self) -> list[str]:
        """ssh-add -l；退出码 1 表示 agent 中没有密钥"""
        r = self._executor.execute(["ssh-add", "-l"])
        if r.returncode == 1:
            return []
        if not r.success:
            raise SSHError(f"ssh-add -l 失败: {r.output}")
        return [line for line in r.stdout.splitlines() if line.strip()]

    def key_path(self, algo: str, name: str = "") -> Path:
        key_file = f"{name}_id_{algo}" if name else f"id_{algo}"
        return self.ssh_dir / key_file

    def generate_key(self, algo: str = "ed25519", name: str = "") -> Path:
        """生成无口令密钥对，返回私钥路径"""
        if algo not in SUPPORTED_ALGOS:
            raise SSHError(f"不支持的算法: {algo}（可选: {', '.join(SUPPORTED_ALGOS)}）")
        key = self.key_path(algo, name)
        if key.exists():
            raise SSHError(f"密钥已存在: {key}")
        self.ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

        r = self._executor.execute(
            ["ssh-keygen", "-t", algo, "-f", str(key), "-N", ""],
        )
        if not r.success:
            raise SSHError(f"ssh-keygen 失败 (rc={r.returncode}): {r.output}")
        logger.info("已生成密钥: %s", key)
        return key

    def add_key_to_agent(self, key: str | Path) -> None:
        # 加密私钥需要在终端输入口令
        r = self._executor.execute(["ssh-add", str(key)], interactive=True)
        if not r.success:
            raise SSHError(f"ssh-add 失败 (rc={r.returncode}): {key}")

    def read_public_key(self, key: str | Path) -> str:
        pub = Path(str(key) + ".pub")
        if not pub.exists():
            raise NotFoundError(f"公钥不存在: {pub}")
        return pub.read_text(encoding="utf-8").strip()

    def remove_key(self, key: str | Path) -> list[Path]:
        """从 agent 移除并删除私钥/公钥文件，返回已删除的文件"""
        key = Path(key)
        if not key.exists():
            raise NotFoundError(f"私钥不存在: {key}")

        # 未加载到 agent 时 ssh-add -d 会失败，忽略
        r = self._executor.execute(["ssh-add", "-d", str(key)])
        if not r.success:
            logger.info("ssh-add -d 未生效 (rc=%d): %s", r.returncode, r.output)

        removed = []
        for f in (key, Path(str(key) + ".pub")):
            if f.exists():
                f.unlink()
                removed.append(f)
        logger.info("已删除密钥: %s", ", ".join(str(f) for f in removed))
        return removed
