"""配置数据模型

配置文件中的全部实体集中定义于此：
- Repository: 受管代码仓
- ToolConfig: 工具配置文件（nvim、tmux、zsh 等）
- Dependency: 开发依赖（下载地址 + 版本）
- Config: 根文档

YAML 中使用 camelCase 键名，Python 侧使用 snake_case 字段，
转换统一由 from_dict / to_dict 负责。
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from devmanager.core.exceptions import ConfigError, NotFoundError, ValidationError

DEFAULT_BRANCH = "main"
DEFAULT_UPDATE_FREQUENCY = timedelta(hours=2)

# Go 风格时长: 2h / 1h30m / 45s / 1.5s / 250ms
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 0.001,
}


# =========================================================================
# 字段转换工具
# =========================================================================

def parse_duration(value: Any) -> timedelta:
    """解析时长字段

    支持:
        - None / 空串 → 0
        - int / float → 秒
        - "2h", "1h30m", "90s", "1h0m0s", "-5m"
    """
    if value is None or value == "":
        return timedelta(0)
    if isinstance(value, bool):
        raise ConfigError(f"无效的时长: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ConfigError(f"无效的时长: {value!r}")

    text = value.strip()
    sign = 1
    if text.startswith("-"):
        sign, text = -1, text[1:]
    if text == "0":
        return timedelta(0)

    pos = 0
    seconds = 0.0
    for m in _DURATION_PART_RE.finditer(text):
        if m.start() != pos:
            break
        seconds += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos == 0 or pos != len(text):
        raise ConfigError(f"无效的时长: {value!r}（示例: 2h, 1h30m, 45s）")
    return timedelta(seconds=sign * seconds)


def format_duration(value: timedelta) -> str:
    """格式化为紧凑的 Go 风格时长（2h, 1h30m, 45s）"""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(int(total), 3600)
    minutes, secs = divmod(rest, 60)
    frac = total - int(total)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or frac:
        parts.append(f"{secs + frac:g}s")
    return sign + "".join(parts)


def parse_timestamp(value: Any) -> datetime | None:
    """解析 lastSync 字段（ISO-8601 字符串或 YAML 已解析的 datetime）"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ConfigError(f"无效的时间戳: {value!r}") from e
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ConfigError(f"无效的时间戳: {value!r}")


def _str_field(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    return "" if value is None else str(value)


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """取出列表节，校验每项都是映射"""
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"'{key}' 必须是列表，实际为 {type(raw).__name__}")
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError(f"'{key}[{i}]' 必须是映射，实际为 {type(item).__name__}")
    return raw


# =========================================================================
# 实体
# =========================================================================

@dataclass
class Repository:
    """受管代码仓"""

    name: str
    url: str
    path: str = ""
    branch: str = DEFAULT_BRANCH
    last_sync: datetime | None = None

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> Repository:
        return cls(
            name=_str_field(entry, "name"),
            url=_str_field(entry, "url"),
            path=_str_field(entry, "path"),
            branch=_str_field(entry, "branch"),
            last_sync=parse_timestamp(entry.get("lastSync")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "branch": self.branch,
            "path": self.path,
        }
        if self.last_sync is not None:
            d["lastSync"] = self.last_sync.isoformat()
        return d


@dataclass
class ToolConfig:
    """工具配置文件及其备份位置"""

    name: str
    config_path: str
    backup_path: str = ""

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> ToolConfig:
        return cls(
            name=_str_field(entry, "name"),
            config_path=_str_field(entry, "configPath"),
            backup_path=_str_field(entry, "backupPath"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "configPath": self.config_path,
            "backupPath": self.backup_path,
        }


@dataclass
class Dependency:
    """开发依赖（工具链、运行时等）"""

    name: str
    version: str = ""
    source: str = ""
    path: str = ""  # 安装后的本地路径

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> Dependency:
        return cls(
            name=_str_field(entry, "name"),
            version=_str_field(entry, "version"),
            source=_str_field(entry, "source"),
            path=_str_field(entry, "path"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "source": self.source,
        }
        if self.path:
            d["path"] = self.path
        return d


@dataclass
class Config:
    """配置根文档"""

    workspace_path: str = ""
    update_frequency: timedelta = timedelta(0)
    repositories: list[Repository] = field(default_factory=list)
    tools: list[ToolConfig] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """从 YAML 映射构建配置，结构错误抛 ConfigError"""
        if not isinstance(data, dict):
            raise ConfigError(f"配置根节点必须是映射，实际为 {type(data).__name__}")
        workspace = _str_field(data, "workspacePath")
        repos = [Repository.from_dict(e) for e in _entries(data, "repositories")]
        # 未写 path 的仓库落在 workspacePath/name；两者缺一时留空，由校验报告
        for repo in repos:
            if not repo.path and workspace and repo.name:
                repo.path = os.path.join(workspace, repo.name)
        return cls(
            workspace_path=workspace,
            update_frequency=parse_duration(data.get("updateFrequency")),
            repositories=repos,
            tools=[ToolConfig.from_dict(e) for e in _entries(data, "tools")],
            dependencies=[Dependency.from_dict(e) for e in _entries(data, "dependencies")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "workspacePath": self.workspace_path,
            "updateFrequency": format_duration(self.update_frequency),
            "repositories": [r.to_dict() for r in self.repositories],
            "tools": [t.to_dict() for t in self.tools],
            "dependencies": [d.to_dict() for d in self.dependencies],
        }

    def validate(self) -> None:
        """校验全部字段，违规时抛出 ValidationError（带完整列表）"""
        from devmanager.core.config import validate_config
        validate_config(self)

    # ---- 仓库 ----

    def find_repository(self, name: str) -> Repository | None:
        for repo in self.repositories:
            if repo.name == name:
                return repo
        return None

    def add_repository(
        self, name: str, url: str, *, branch: str = "", path: str = "",
    ) -> Repository:
        """追加仓库；path 默认 workspacePath/name，branch 默认 main

        重名时抛 ValidationError，未指定 path 且 workspacePath 为空时抛 ConfigError，
        两种情况都不修改配置。
        """
        if not name:
            raise ValidationError("仓库 name 为必填")
        if not url:
            raise ValidationError("仓库 url 为必填")
        if self.find_repository(name) is not None:
            raise ValidationError(f"仓库已存在: {name}")
        if not path and not self.workspace_path:
            raise ConfigError("workspacePath 未设置，请先执行 init")
        repo = Repository(
            name=name,
            url=url,
            path=path or os.path.join(self.workspace_path, name),
            branch=branch or DEFAULT_BRANCH,
        )
        self.repositories.append(repo)
        return repo

    def remove_repository(self, name: str) -> Repository:
        repo = self.find_repository(name)
        if repo is None:
            raise NotFoundError(f"仓库未受管理: {name}")
        self.repositories.remove(repo)
        return repo

    # ---- 依赖 ----

    def find_dependency(self, name: str) -> Dependency | None:
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        return None

    def add_dependency(self, name: str, *, version: str = "", source: str = "") -> Dependency:
        if not name:
            raise ValidationError("依赖 name 为必填")
        if self.find_dependency(name) is not None:
            raise ValidationError(f"依赖已存在: {name}")
        dep = Dependency(name=name, version=version, source=source)
        self.dependencies.append(dep)
        return dep

    def remove_dependency(self, name: str) -> Dependency:
        dep = self.find_dependency(name)
        if dep is None:
            raise NotFoundError(f"依赖不在配置中: {name}")
        self.dependencies.remove(dep)
        return dep
