"""CLI — 开发依赖管理"""

from __future__ import annotations

from pathlib import Path

import click

from devmanager.services.container import ServiceContainer


@click.command(name="add")
@click.argument("name")
@click.option("--version", "-v", "version", default="", help="版本号")
@click.option("--source", "-s", default="", help="下载地址（.tar.gz 或二进制文件）")
@click.option("--install/--no-install", default=None, help="添加后立即安装（不指定则询问）")
@click.pass_obj
def deps_add(
    svc: ServiceContainer, name: str, version: str, source: str, install: bool | None,
) -> None:
    """添加依赖到配置"""
    svc.deps.add(name, version=version, source=source)
    click.echo(f"已添加依赖 {name}")

    if install is None:
        install = bool(source) and svc.prompter.confirm("现在安装该依赖？", default=True)
    if not install:
        click.echo(f"依赖 {name} 将在下次 deps install 时安装。")
        return
    path = svc.deps.install(name)
    click.echo(f"已安装 {name} -> {path}")


@click.command(name="install")
@click.argument("name", required=False)
@click.option("--force", is_flag=True, help="覆盖已有安装")
@click.pass_context
def deps_install(ctx: click.Context, name: str | None, force: bool) -> None:
    """安装依赖（不指定名称则安装全部未安装的依赖）"""
    svc: ServiceContainer = ctx.obj
    if name:
        path = svc.deps.install(name, force=force)
        click.echo(f"已安装 {name} -> {path}")
        return

    results = svc.deps.install_all(force=force)
    if not results:
        click.echo("配置中没有依赖。")
        return
    failed = 0
    for dep_name, result in results.items():
        if isinstance(result, Path):
            click.echo(f"  [OK  ] {dep_name} -> {result}")
        else:
            failed += 1
            click.echo(f"  [FAIL] {dep_name}: {result}")
    if failed:
        ctx.exit(1)


@click.command(name="list")
@click.pass_obj
def deps_list(svc: ServiceContainer) -> None:
    """列出依赖及安装状态"""
    statuses = svc.deps.list_all()
    if not statuses:
        click.echo("配置中没有依赖。")
        return
    for s in statuses:
        state = "已安装" if s.installed else "未安装"
        click.echo(f"  {s.dep.name:15s} {s.dep.version or '-':12s} [{state}]  {s.dep.source}")


@click.command(name="remove")
@click.argument("name", required=False)
@click.pass_obj
def deps_remove(svc: ServiceContainer, name: str | None) -> None:
    """从配置移除依赖并卸载（不指定名称时交互选择）"""
    if not name:
        deps = svc.config.dependencies
        if not deps:
            click.echo("配置中没有依赖。")
            return
        idx = svc.prompter.choose(
            "选择要移除的依赖", [f"{d.name} ({d.version or '-'})" for d in deps],
        )
        if idx is None:
            click.echo("已取消。")
            return
        name = deps[idx].name

    svc.deps.remove(name)
    click.echo(f"已移除依赖 {name}")


COMMANDS = [deps_add, deps_install, deps_list, deps_remove]
