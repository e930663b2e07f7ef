"""开发依赖管理器 — 下载 / 解压 / 安装 / 卸载

依赖安装到 <workspacePath>/deps/<name>:

  1. 下载 source 到临时目录
  2. .tar.gz / .tgz 解压；其他文件按二进制处理，以依赖名保存
  3. 移动到最终位置（force 时覆盖已有安装）
  4. 赋予可执行权限

用法:
    dm = DepManager(Path(cfg.workspace_path) / "deps")
    dm.install(dep)
    dm.install_all(cfg.dependencies)
"""

from __future__ import annotations

import logging
import shutil
import stat
import tarfile
import tempfile
import urllib.error
import urllib.request
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlparse

from devmanager.core.exceptions import DependencyError
from devmanager.core.models import Dependency

logger = logging.getLogger(__name__)

Downloader = Callable[[str, Path], None]

_ALLOWED_SCHEMES = frozenset(("http", "https"))
_TAR_SUFFIXES = (".tar.gz", ".tgz")
# 目录安装时按此顺序寻找主可执行文件
_BINARY_CANDIDATES = ("bin", "sbin", "exec", "main")


def urllib_download(url: str, dest: Path) -> None:
    """默认下载实现"""
    urllib.request.urlretrieve(url, str(dest))  # nosec B310


class DepManager:
    """依赖安装管理"""

    def __init__(self, install_dir: str | Path, downloader: Downloader | None = None) -> None:
        self.install_dir = Path(install_dir)
        self._download = downloader or urllib_download

    def install_path(self, dep: Dependency) -> Path:
        return self.install_dir / dep.name

    def is_installed(self, dep: Dependency) -> bool:
        return self.install_path(dep).exists()

    def install(self, dep: Dependency, *, force: bool = False) -> Path:
        """安装单个依赖，返回安装路径"""
        dest = self.install_path(dep)
        if dest.exists() and not force:
            raise DependencyError(f"{dep.name} 已安装: {dest}（使用 --force 覆盖）")
        if not dep.source:
            raise DependencyError(f"依赖 '{dep.name}' 未定义 source")
        scheme = urlparse(dep.source).scheme
        if scheme not in _ALLOWED_SCHEMES:
            raise DependencyError(
                f"不允许的 URL 协议 '{scheme}' ({dep.name})，仅支持 http/https: {dep.source}"
            )

        self.install_dir.mkdir(parents=True, exist_ok=True)
        filename = dep.source.rstrip("/").split("/")[-1] or dep.name

        with tempfile.TemporaryDirectory(prefix="dev-manager-") as tmp:
            tmp_dir = Path(tmp)
            archive = tmp_dir / filename
            logger.info("下载 %s@%s: %s", dep.name, dep.version or "-", dep.source)
            try:
                self._download(dep.source, archive)
            except (urllib.error.URLError, OSError) as e:
                raise DependencyError(f"下载失败 {dep.name}: {dep.source} - {e}") from e

            staged = tmp_dir / "staged"
            staged.mkdir()
            self._unpack(dep, archive, staged)

            if dest.is_dir():
                shutil.rmtree(dest)
            elif dest.exists():
                dest.unlink()
            shutil.move(str(staged), str(dest))

        self._make_executable(dest)
        logger.info("已安装 %s -> %s", dep.name, dest)
        return dest

    def install_all(
        self, deps: list[Dependency], *, force: bool = False,
    ) -> dict[str, Path | str]:
        """安装全部未安装的依赖，返回 {name: path | 错误信息}，单个失败不中断"""
        results: dict[str, Path | str] = {}
        for dep in deps:
            if self.is_installed(dep) and not force:
                logger.info("已安装，跳过: %s", dep.name)
                results[dep.name] = self.install_path(dep)
                continue
            try:
                results[dep.name] = self.install(dep, force=force)
            except DependencyError as e:
                logger.error("安装失败 %s: %s", dep.name, e)
                results[dep.name] = f"[FAILED] {e}"
        return results

    def remove(self, dep: Dependency) -> bool:
        """卸载依赖，返回是否确实删除了文件"""
        dest = self.install_path(dep)
        if not dest.exists():
            return False
        try:
            if dest.is_dir():
                shutil.rmtree(dest)
            else:
                dest.unlink()
        except OSError as e:
            raise DependencyError(f"卸载失败 {dep.name}: {e}") from e
        logger.info("已卸载 %s", dep.name)
        return True

    @staticmethod
    def _unpack(dep: Dependency, archive: Path, staged: Path) -> None:
        source = dep.source.lower()
        if source.endswith(_TAR_SUFFIXES):
            try:
                with tarfile.open(archive) as tf:
                    tf.extractall(path=str(staged), filter="data")  # noqa: S202
            except (tarfile.TarError, OSError) as e:
                raise DependencyError(f"解压失败 {dep.name}: {e}") from e
        elif source.endswith(".zip"):
            raise DependencyError(f"暂不支持 zip 格式: {dep.source}")
        else:
            shutil.move(str(archive), str(staged / dep.name))

    @staticmethod
    def _make_executable(path: Path) -> None:
        target = path
        if path.is_dir():
            for name in _BINARY_CANDIDATES:
                if (path / name).exists():
                    target = path / name
                    break
            else:
                # 二进制安装时 staged 目录内只有一个以依赖名命名的文件
                single = path / path.name
                if single.is_file():
                    target = single
        mode = target.stat().st_mode
        target.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
