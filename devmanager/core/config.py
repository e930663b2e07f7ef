"""配置存储 — 加载 / 保存 / 校验

配置文件路径优先级:
  1. 显式传入（CLI --config）
  2. 环境变量 DEV_MANAGER_CONFIG
  3. ~/.config/dev-manager/config.yaml

生命周期:
  进程启动时加载一次（文件不存在视为空配置，不报错），
  变更类命令在内存中修改后整体原子写回同一路径。
"""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from pathlib import Path

import yaml

from devmanager.core.exceptions import ConfigError, ValidationError
from devmanager.core.models import Config
from devmanager.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEV_MANAGER_CONFIG"


def default_config_path() -> Path:
    """解析默认配置文件路径"""
    override = os.getenv(CONFIG_ENV_VAR, "")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "dev-manager" / "config.yaml"


class ConfigStore:
    """YAML 配置文件的读写入口"""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path else default_config_path()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Config:
        """读取配置；文件不存在返回空配置，其余失败抛 ConfigError"""
        if not self.path.exists():
            logger.info("配置文件不存在，使用空配置: %s", self.path)
            return Config()
        try:
            data = load_yaml(self.path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"读取配置失败 {self.path}: {e}") from e
        cfg = Config.from_dict(data)
        logger.info(
            "配置已加载: %s (%d 个仓库, %d 个依赖)",
            self.path, len(cfg.repositories), len(cfg.dependencies),
        )
        return cfg

    def save(self, config: Config) -> None:
        """原子写回配置文件，自动创建父目录"""
        try:
            save_yaml(self.path, config.to_dict())
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"保存配置失败 {self.path}: {e}") from e
        logger.info("配置已保存: %s", self.path)


# =========================================================================
# 校验
# =========================================================================

def collect_errors(config: Config) -> list[str]:
    """收集全部违规项（不在第一个错误处停止）"""
    errors: list[str] = []

    if not config.workspace_path:
        errors.append("workspacePath 不能为空")
    if config.update_frequency <= timedelta(0):
        errors.append("updateFrequency 必须大于 0")

    seen: set[str] = set()
    for i, repo in enumerate(config.repositories):
        tag = f"repositories[{i}] ({repo.name or '<未命名>'})"
        for key, value in (
            ("name", repo.name), ("url", repo.url),
            ("path", repo.path), ("branch", repo.branch),
        ):
            if not value:
                errors.append(f"{tag}: {key} 不能为空")
        if repo.name and repo.name in seen:
            errors.append(f"{tag}: name 重复")
        seen.add(repo.name)

    for i, tool in enumerate(config.tools):
        tag = f"tools[{i}] ({tool.name or '<未命名>'})"
        if not tool.name:
            errors.append(f"{tag}: name 不能为空")
        if not tool.config_path:
            errors.append(f"{tag}: configPath 不能为空")

    seen = set()
    for i, dep in enumerate(config.dependencies):
        tag = f"dependencies[{i}] ({dep.name or '<未命名>'})"
        if not dep.name:
            errors.append(f"{tag}: name 不能为空")
        elif dep.name in seen:
            errors.append(f"{tag}: name 重复")
        seen.add(dep.name)

    return errors


def validate_config(config: Config) -> None:
    """校验配置，存在违规时抛 ValidationError(details=全部违规项)"""
    errors = collect_errors(config)
    if errors:
        raise ValidationError(f"配置校验失败，共 {len(errors)} 处错误", details=errors)
