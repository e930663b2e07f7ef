"""配置服务 — init / show / validate"""

from __future__ import annotations

import logging
from pathlib import Path

from devmanager.core.config import ConfigStore, validate_config
from devmanager.core.models import DEFAULT_UPDATE_FREQUENCY, Config
from devmanager.utils.yaml_io import dump_yaml

logger = logging.getLogger(__name__)


def default_workspace() -> Path:
    return Path.home() / "dev"


class ConfigService:
    """配置文件的初始化与检查"""

    def __init__(self, store: ConfigStore, config: Config) -> None:
        self._store = store
        self._config = config

    @property
    def path(self) -> Path:
        return self._store.path

    @property
    def config(self) -> Config:
        return self._config

    def init(self, workspace: str = "") -> Config:
        """补全缺省值、校验并写回；已有的 workspacePath / updateFrequency 保持不变

        校验失败时抛 ValidationError，不写文件。
        """
        cfg = self._config
        if not cfg.workspace_path:
            cfg.workspace_path = str(Path(workspace).expanduser() if workspace else default_workspace())
        if not cfg.update_frequency:
            cfg.update_frequency = DEFAULT_UPDATE_FREQUENCY
        validate_config(cfg)

        Path(cfg.workspace_path).mkdir(parents=True, exist_ok=True)
        self._store.save(cfg)
        logger.info("配置已初始化: %s (workspace=%s)", self._store.path, cfg.workspace_path)
        return cfg

    def validate(self) -> None:
        validate_config(self._config)

    def render_raw(self) -> str:
        return dump_yaml(self._config.to_dict())
