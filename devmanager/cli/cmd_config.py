"""CLI — init 与配置查看/校验"""

from __future__ import annotations

from pathlib import Path

import click

from devmanager.core.models import Repository, format_duration
from devmanager.services.container import ServiceContainer


def echo_repository_details(repos: list[Repository]) -> None:
    for r in repos:
        last = r.last_sync.isoformat() if r.last_sync else "从未同步"
        click.echo(f"名称: {r.name}")
        click.echo(f"  URL:    {r.url}")
        click.echo(f"  路径:   {r.path}")
        click.echo(f"  分支:   {r.branch}")
        click.echo(f"  上次同步: {last}")
        click.echo()


@click.command(name="init")
@click.option("--workspace", "-w", default="", help="仓库克隆的工作目录（默认 ~/dev）")
@click.option("--install-deps", "-i", is_flag=True, help="同时安装配置中的依赖")
@click.pass_obj
def init_cmd(svc: ServiceContainer, workspace: str, install_deps: bool) -> None:
    """初始化配置文件和工作目录"""
    cfg = svc.config_service.init(workspace)
    click.echo(f"配置已初始化: {svc.store.path}")
    click.echo(f"工作目录: {cfg.workspace_path}")

    if install_deps and cfg.dependencies:
        click.echo("\n安装依赖...")
        for name, result in svc.deps.install_all().items():
            if isinstance(result, Path):
                click.echo(f"  {name}: {result}")
            else:
                click.echo(f"  {name}: {result}", err=True)


@click.command(name="show")
@click.option("--raw", is_flag=True, help="输出原始 YAML")
@click.pass_obj
def config_show(svc: ServiceContainer, raw: bool) -> None:
    """查看当前配置"""
    if raw:
        click.echo(svc.config_service.render_raw(), nl=False)
        return

    cfg = svc.config
    click.echo(f"配置文件: {svc.store.path}")
    click.echo(f"工作目录: {cfg.workspace_path or '(未设置)'}")
    click.echo(f"同步周期: {format_duration(cfg.update_frequency)}\n")

    if not cfg.repositories:
        click.echo("没有受管仓库。")
    else:
        click.echo(f"受管仓库 ({len(cfg.repositories)}):\n")
        echo_repository_details(cfg.repositories)

    if cfg.tools:
        click.echo(f"工具配置 ({len(cfg.tools)}):")
        for t in cfg.tools:
            backup = f"  备份={t.backup_path}" if t.backup_path else ""
            click.echo(f"  {t.name:15s} {t.config_path}{backup}")


@click.command(name="validate")
@click.pass_obj
def config_validate(svc: ServiceContainer) -> None:
    """校验配置文件，一次列出全部错误"""
    click.echo(f"校验配置: {svc.store.path}\n")
    svc.config_service.validate()
    click.echo("配置有效。")


COMMANDS = [config_show, config_validate]
