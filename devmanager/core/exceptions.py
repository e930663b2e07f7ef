"""统一异常体系

所有业务异常继承 DevManagerError。
CLI 层捕获基类并输出到 stderr，进程以非零退出码结束。
"""

from __future__ import annotations


class DevManagerError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(DevManagerError):
    """配置文件读取、解析或写入失败（文件不存在除外）"""

    code = "CONFIG_ERROR"


class ValidationError(DevManagerError):
    """字段校验失败，details 收集全部违规项"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []

    def __str__(self) -> str:
        if not self.details:
            return super().__str__()
        lines = [super().__str__()]
        lines.extend(f"  - {d}" for d in self.details)
        return "\n".join(lines)


class NotFoundError(DevManagerError):
    """引用的仓库 / 依赖 / 密钥在配置或磁盘中不存在"""

    code = "NOT_FOUND"


class CommandError(DevManagerError):
    """外部命令以非零状态退出，output 为捕获的输出"""

    code = "COMMAND_ERROR"

    def __init__(self, message: str, output: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}: {self.output}" if self.output else base


class CloneError(CommandError):
    """仓库克隆失败（目录无法创建或 git clone 失败）"""

    code = "CLONE_ERROR"


class SyncError(CommandError):
    """仓库同步失败，stage 区分 fetch / rebase / status"""

    code = "SYNC_ERROR"

    STAGE_FETCH = "fetch"
    STAGE_REBASE = "rebase"
    STAGE_STATUS = "status"

    def __init__(
        self, message: str, *, stage: str,
        output: str = "", returncode: int | None = None,
    ) -> None:
        super().__init__(message, output=output, returncode=returncode)
        self.stage = stage


class DependencyError(DevManagerError):
    """依赖下载、解压或安装失败"""

    code = "DEPENDENCY_ERROR"


class SSHError(DevManagerError):
    """SSH 工具缺失或 ssh-keygen / ssh-add 调用失败"""

    code = "SSH_ERROR"
