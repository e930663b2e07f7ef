"""yaml_io 单元测试"""

from __future__ import annotations

import pytest
import yaml

from devmanager.utils.yaml_io import atomic_write, dump_yaml, load_yaml, save_yaml


class TestYamlIO:
    def test_missing_file_is_empty_dict(self, tmp_path) -> None:
        assert load_yaml(tmp_path / "nope.yaml") == {}

    def test_empty_file_is_empty_dict(self, tmp_path) -> None:
        p = tmp_path / "empty.yaml"
        p.write_text("", encoding="utf-8")
        assert load_yaml(p) == {}

    def test_save_creates_parent_and_keeps_order(self, tmp_path) -> None:
        p = tmp_path / "a" / "b" / "c.yaml"
        save_yaml(p, {"z": 1, "a": "中文"})
        text = p.read_text(encoding="utf-8")
        assert text.index("z:") < text.index("a:")
        assert "中文" in text
        assert load_yaml(p) == {"z": 1, "a": "中文"}

    def test_invalid_yaml_raises(self, tmp_path) -> None:
        p = tmp_path / "bad.yaml"
        p.write_text("a: [1, 2\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_yaml(p)

    def test_atomic_write_leaves_no_tmp(self, tmp_path) -> None:
        p = tmp_path / "x.txt"
        atomic_write(p, "hello")
        atomic_write(p, "world")
        assert p.read_text(encoding="utf-8") == "world"
        assert [f.name for f in tmp_path.iterdir()] == ["x.txt"]

    def test_dump_block_style(self) -> None:
        assert dump_yaml({"items": [1]}) == "items:\n- 1\n"
