"""dev-manager 命令行接口

命令树在 create_cli() 中按 command_table() 显式组装，各子模块只定义命令对象，
不在 import 时向全局 group 注册。
每次调用创建一个 ServiceContainer 放入 ctx.obj，测试可通过 obj= 注入。
"""

from __future__ import annotations

from typing import Any

import click

from devmanager import __version__
from devmanager.core.config import CONFIG_ENV_VAR
from devmanager.core.exceptions import DevManagerError
from devmanager.services.container import ServiceContainer
from devmanager.utils.logger import setup_logging_from_env


class DevManagerGroup(click.Group):
    """将业务异常转为 ClickException：stderr 输出，退出码 1"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except DevManagerError as e:
            raise click.ClickException(str(e)) from e


def _subgroup(name: str, help_text: str, commands: list[click.Command]) -> click.Group:
    group = click.Group(name=name, help=help_text)
    for cmd in commands:
        group.add_command(cmd)
    return group


def command_table() -> list[click.Command]:
    """顶层命令表（唯一的规范命令树）"""
    from devmanager.cli import cmd_config, cmd_deps, cmd_git, cmd_repo, cmd_ssh

    return [
        cmd_config.init_cmd,
        _subgroup("repo", "受管仓库管理", cmd_repo.COMMANDS),
        _subgroup("config", "配置文件查看与校验", cmd_config.COMMANDS),
        _subgroup("ssh", "SSH 密钥与 ssh-agent 管理", cmd_ssh.COMMANDS),
        _subgroup("deps", "开发依赖管理", cmd_deps.COMMANDS),
        _subgroup("git", "Git 工作流增强（LLM 提交信息与 PR 审阅建议）", cmd_git.COMMANDS),
    ]


def create_cli() -> click.Group:
    @click.group(cls=DevManagerGroup)
    @click.version_option(version=__version__, prog_name="dev-manager")
    @click.option(
        "--config", "-c", "config_path", default=None, envvar=CONFIG_ENV_VAR,
        help="配置文件路径（默认 ~/.config/dev-manager/config.yaml）",
    )
    @click.pass_context
    def cli(ctx: click.Context, config_path: str | None) -> None:
        """dev-manager - 开发环境管理工具

        \b
        - 管理 Git 仓库（克隆、同步）
        - 管理 SSH 密钥
        - 管理开发依赖
        """
        setup_logging_from_env()
        if ctx.obj is None:
            ctx.obj = ServiceContainer(config_path)

    for command in command_table():
        cli.add_command(command)
    return cli


main = create_cli()
