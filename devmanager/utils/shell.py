"""子进程执行工具 — git / ssh-keygen / ssh-add 的统一调用入口

所有外部命令都经由 CommandExecutor 协议执行，业务代码只消费退出码和输出。
测试时注入假执行器即可，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """合并后的 stdout + stderr，用于错误信息"""
        return (self.stdout + self.stderr).strip()


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    实现此协议即可替换底层执行方式。
    测试时可注入 fake 实现，按命令返回预设结果。
    """

    def execute(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        """执行命令并返回结果

        interactive=True 时继承终端的 stdin/stdout/stderr（如 ssh-add 询问口令），
        此时结果中不包含输出。
        """
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）

    同步阻塞直到进程退出，不设超时。
    """

    def execute(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        logger.debug("执行: %s (cwd=%s)", " ".join(args), cwd or ".")
        try:
            if interactive:
                r = subprocess.run(args, cwd=cwd, env=env, check=False)
                return CommandResult(returncode=r.returncode)
            r = subprocess.run(
                args, capture_output=True, text=True,
                cwd=cwd, env=env, check=False,
            )
        except FileNotFoundError as e:
            # 可执行文件不存在时按 127 处理，与 shell 行为一致
            return CommandResult(returncode=127, stderr=str(e))
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )
