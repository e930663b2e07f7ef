"""models 单元测试：时长 / 时间戳 / 实体转换 / 增删"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from devmanager.core.exceptions import ConfigError, NotFoundError, ValidationError
from devmanager.core.models import (
    Config,
    Dependency,
    Repository,
    format_duration,
    parse_duration,
    parse_timestamp,
)


class TestDuration:
    @pytest.mark.parametrize(("text", "expected"), [
        ("2h", timedelta(hours=2)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("1h0m0s", timedelta(hours=1)),
        ("250ms", timedelta(milliseconds=250)),
        ("-5m", timedelta(minutes=-5)),
        ("0", timedelta(0)),
        (3600, timedelta(hours=1)),
        (None, timedelta(0)),
        ("", timedelta(0)),
    ])
    def test_parse(self, text, expected) -> None:
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("bad", ["2x", "h", "2h junk", True, [1]])
    def test_parse_invalid(self, bad) -> None:
        with pytest.raises(ConfigError, match="无效的时长"):
            parse_duration(bad)

    def test_format(self) -> None:
        assert format_duration(timedelta(hours=2)) == "2h"
        assert format_duration(timedelta(hours=1, minutes=30)) == "1h30m"
        assert format_duration(timedelta(0)) == "0s"
        assert format_duration(timedelta(seconds=1.5)) == "1.5s"
        assert format_duration(timedelta(minutes=-5)) == "-5m"


class TestTimestamp:
    def test_iso_with_z(self) -> None:
        ts = parse_timestamp("2024-01-02T03:04:05Z")
        assert ts == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_naive_datetime_becomes_utc(self) -> None:
        ts = parse_timestamp(datetime(2024, 1, 2))
        assert ts is not None and ts.tzinfo == timezone.utc

    def test_empty_is_none(self) -> None:
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_invalid(self) -> None:
        with pytest.raises(ConfigError, match="无效的时间戳"):
            parse_timestamp("yesterday")


class TestEntities:
    def test_repository_keeps_empty_branch(self) -> None:
        repo = Repository.from_dict({"name": "a", "url": "u", "path": "/p"})
        assert repo.branch == ""

    def test_repository_to_dict_omits_missing_last_sync(self) -> None:
        d = Repository("a", "u", "/p", "dev").to_dict()
        assert d == {"name": "a", "url": "u", "branch": "dev", "path": "/p"}

    def test_repository_last_sync_serialized(self) -> None:
        ts = datetime(2024, 5, 1, tzinfo=timezone.utc)
        d = Repository("a", "u", "/p", last_sync=ts).to_dict()
        assert d["lastSync"] == "2024-05-01T00:00:00+00:00"

    def test_dependency_path_omitted_when_empty(self) -> None:
        assert "path" not in Dependency("go", "1.22", "https://x/go.tgz").to_dict()

    def test_config_camel_case_keys(self) -> None:
        cfg = Config.from_dict({
            "workspacePath": "/ws",
            "updateFrequency": "1h",
            "tools": [{"name": "nvim", "configPath": "~/.config/nvim", "backupPath": "/bk"}],
        })
        assert cfg.workspace_path == "/ws"
        assert cfg.tools[0].config_path == "~/.config/nvim"
        assert list(cfg.to_dict()) == [
            "workspacePath", "updateFrequency", "repositories", "tools", "dependencies",
        ]

    def test_config_rejects_non_list_section(self) -> None:
        with pytest.raises(ConfigError, match="repositories"):
            Config.from_dict({"repositories": {"a": 1}})

    def test_config_rejects_non_mapping_entry(self) -> None:
        with pytest.raises(ConfigError, match=r"dependencies\[0\]"):
            Config.from_dict({"dependencies": ["go"]})

    def test_config_rejects_non_mapping_root(self) -> None:
        with pytest.raises(ConfigError, match="根节点"):
            Config.from_dict(["a"])  # type: ignore[arg-type]


class TestConfigMutation:
    def test_add_repository_defaults(self) -> None:
        cfg = Config(workspace_path="/ws")
        repo = cfg.add_repository("api", "git@x:api.git")
        assert repo.path == "/ws/api"
        assert repo.branch == "main"

    def test_add_repository_duplicate(self) -> None:
        cfg = Config(workspace_path="/ws")
        cfg.add_repository("api", "u1")
        with pytest.raises(ValidationError, match="已存在"):
            cfg.add_repository("api", "u2")
        assert len(cfg.repositories) == 1
        assert cfg.repositories[0].url == "u1"

    def test_add_repository_requires_workspace(self) -> None:
        cfg = Config()
        with pytest.raises(ConfigError, match="workspacePath 未设置"):
            cfg.add_repository("api", "git@x:api.git")
        assert cfg.repositories == []

    def test_add_repository_explicit_path_without_workspace(self) -> None:
        repo = Config().add_repository("api", "git@x:api.git", path="/src/api")
        assert repo.path == "/src/api"

    def test_missing_path_derived_on_load(self) -> None:
        cfg = Config.from_dict({"workspacePath": "/ws", "repositories": [{"name": "api", "url": "u"}]})
        assert cfg.repositories[0].path == "/ws/api"

    def test_missing_path_kept_empty_without_workspace(self) -> None:
        cfg = Config.from_dict({"repositories": [{"name": "api", "url": "u"}]})
        assert cfg.repositories[0].path == ""

    def test_add_repository_requires_url(self) -> None:
        with pytest.raises(ValidationError, match="url"):
            Config(workspace_path="/ws").add_repository("api", "")

    def test_remove_missing_repository(self) -> None:
        with pytest.raises(NotFoundError):
            Config().remove_repository("ghost")

    def test_dependency_add_remove(self) -> None:
        cfg = Config()
        cfg.add_dependency("go", version="1.22")
        with pytest.raises(ValidationError):
            cfg.add_dependency("go")
        assert cfg.remove_dependency("go").version == "1.22"
        assert cfg.dependencies == []
