"""CLI — 受管仓库管理"""

from __future__ import annotations

from pathlib import Path

import click

from devmanager.cli.cmd_config import echo_repository_details
from devmanager.core.sync import STATUS_CLONED, STATUS_FAILED, STATUS_SKIPPED, STATUS_UPDATED
from devmanager.services.container import ServiceContainer

_STATUS_MARKS = {
    STATUS_CLONED: "CLONE",
    STATUS_UPDATED: "OK",
    STATUS_SKIPPED: "SKIP",
    STATUS_FAILED: "FAIL",
}


@click.command(name="add")
@click.argument("name")
@click.argument("url")
@click.option("--branch", "-b", default="", help="跟踪的分支（默认 main）")
@click.option("--path", "-p", "path", default="", help="本地路径（默认 <workspace>/<name>）")
@click.option("--clone/--no-clone", default=None, help="添加后立即克隆（不指定则询问）")
@click.pass_obj
def repo_add(
    svc: ServiceContainer, name: str, url: str, branch: str, path: str, clone: bool | None,
) -> None:
    """添加受管仓库"""
    repo = svc.repo.add(name, url, branch=branch, path=path)
    click.echo(f"已添加仓库 '{repo.name}': {repo.url}")
    click.echo(f"克隆目标: {repo.path}")

    if clone is None:
        clone = svc.prompter.confirm("现在克隆该仓库？", default=True)
    if not clone:
        click.echo("将在下次同步时克隆。")
        return
    svc.repo.clone(name)
    click.echo(f"已克隆到 {repo.path}")


@click.command(name="remove")
@click.argument("name", required=False)
@click.option(
    "--delete-dir/--keep-dir", default=None,
    help="同时删除本地目录（不指定且目录存在时询问）",
)
@click.pass_obj
def repo_remove(svc: ServiceContainer, name: str | None, delete_dir: bool | None) -> None:
    """移除受管仓库（不指定名称时交互选择）"""
    if not name:
        repos = svc.repo.list_all()
        if not repos:
            click.echo("没有受管仓库。")
            return
        idx = svc.prompter.choose("选择要移除的仓库", [f"{r.name} ({r.url})" for r in repos])
        if idx is None:
            click.echo("已取消。")
            return
        name = repos[idx].name

    repo = svc.repo.get(name)
    if delete_dir is None:
        delete_dir = Path(repo.path).exists() and svc.prompter.confirm(
            f"同时删除仓库目录 {repo.path}？", default=False,
        )
    svc.repo.remove(name, delete_dir=delete_dir)
    click.echo(f"已移除仓库 '{name}'")
    if delete_dir:
        click.echo(f"已删除目录: {repo.path}")


@click.command(name="list")
@click.pass_obj
def repo_list(svc: ServiceContainer) -> None:
    """列出受管仓库"""
    repos = svc.repo.list_all()
    if not repos:
        click.echo("没有受管仓库。")
        return
    click.echo(f"受管仓库 ({len(repos)}):\n")
    echo_repository_details(repos)


@click.command(name="sync")
@click.argument("name", required=False)
@click.option("--include-dirty", is_flag=True, help="工作区有未提交变更时也执行 rebase")
@click.pass_context
def repo_sync(ctx: click.Context, name: str | None, include_dirty: bool) -> None:
    """同步仓库：不存在则克隆，存在则 fetch + rebase"""
    svc: ServiceContainer = ctx.obj
    report = svc.repo.sync(name, skip_dirty=not include_dirty)
    if not report.results:
        click.echo("没有受管仓库。")
        return

    for r in report.results:
        mark = _STATUS_MARKS.get(r.status, r.status.upper())
        detail = f": {r.message}" if r.message else ""
        click.echo(f"  [{mark:5s}] {r.name}{detail}")

    click.echo(
        f"\n成功 {len(report.succeeded)}  跳过 {len(report.skipped)}  失败 {len(report.failed)}"
    )
    if not report.success:
        ctx.exit(1)


COMMANDS = [repo_add, repo_remove, repo_list, repo_sync]
