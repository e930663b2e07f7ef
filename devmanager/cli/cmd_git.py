"""CLI — Git 工作流增强"""

from __future__ import annotations

import click

from devmanager.services.container import ServiceContainer


@click.command(name="commit")
@click.option("--message", "-m", default="", help="自定义提交信息（跳过 LLM）")
@click.option("--no-push", is_flag=True, help="提交后不推送")
@click.option("--no-llm", is_flag=True, help="不使用 LLM，手动输入提交信息")
@click.pass_obj
def git_commit(svc: ServiceContainer, message: str, no_push: bool, no_llm: bool) -> None:
    """暂存全部变更并提交，可由 LLM 生成提交信息"""
    outcome = svc.commit_assistant().run(
        message=message, push=not no_push, use_llm=not no_llm, show=click.echo,
    )
    if not outcome.committed:
        click.echo("已中止，未提交。")
    elif outcome.pushed:
        click.echo("已提交并推送。")
    else:
        click.echo("已提交。")


@click.command(name="review")
@click.option("--pr", "-p", "pr_number", default=0, type=int, help="PR 编号（不指定则按当前分支查找）")
@click.pass_obj
def git_review(svc: ServiceContainer, pr_number: int) -> None:
    """汇总 PR 评论与改动，由 LLM 给出处理建议"""
    suggestions = svc.review_assistant().run(pr_number)
    click.echo(f"\nPR 审阅建议:\n{suggestions}")


COMMANDS = [git_commit, git_review]
