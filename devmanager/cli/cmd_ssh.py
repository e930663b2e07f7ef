"""CLI — SSH 密钥管理"""

from __future__ import annotations

import click
import pyperclip

from devmanager.core.exceptions import DevManagerError, NotFoundError, SSHError
from devmanager.core.ssh_manager import SUPPORTED_ALGOS
from devmanager.services.container import ServiceContainer

_KEY_OPTION = click.option("--key", "-k", default="", help="私钥路径（不指定则交互选择）")


def _select_key(svc: ServiceContainer, key: str, action: str) -> str:
    """返回 --key 或交互选择的私钥路径；用户放弃时返回空串"""
    if key:
        return key
    keys = svc.ssh.list_private_keys()
    if not keys:
        raise NotFoundError(f"{svc.ssh.ssh_dir} 中没有找到 SSH 密钥")
    idx = svc.prompter.choose(f"选择要{action}的密钥", [str(k) for k in keys])
    if idx is None:
        click.echo("已取消。")
        return ""
    return str(keys[idx])


@click.command(name="init")
@click.pass_obj
def ssh_init(svc: ServiceContainer) -> None:
    """引导式配置：检查工具与 agent，必要时生成密钥并加入 agent"""
    click.echo("检查 SSH 工具链...")
    svc.ssh.check_tools()
    click.echo("[OK] ssh 工具链齐全")

    if not svc.ssh.is_agent_running():
        raise SSHError("ssh-agent 未运行（SSH_AUTH_SOCK 未设置），请先启动 ssh-agent")
    click.echo("[OK] ssh-agent 正在运行")

    keys = svc.ssh.list_private_keys()
    if keys:
        click.echo(f"找到 {len(keys)} 个私钥:")
        for k in keys:
            click.echo(f"  {k}")
    else:
        click.echo("没有找到 SSH 密钥。")
        if not svc.prompter.confirm("现在生成新的密钥对？", default=True):
            click.echo("跳过密钥生成。")
            return
        algo = svc.prompter.ask(
            f"密钥算法（{'/'.join(SUPPORTED_ALGOS)}）", default="ed25519",
        )
        name = svc.prompter.ask("密钥名称前缀（可留空）")
        key = svc.ssh.generate_key(algo, name)
        click.echo(f"已生成密钥: {key}")
        keys = [key]

    if svc.ssh.list_agent_keys():
        click.echo("ssh-agent 中已有密钥。")
    else:
        click.echo(f"ssh-agent 中没有密钥，加入 {keys[0]}")
        svc.ssh.add_key_to_agent(keys[0])
        click.echo("已加入 ssh-agent。")

    try:
        click.echo(f"\n公钥 ({keys[0]}.pub):\n{svc.ssh.read_public_key(keys[0])}\n")
    except NotFoundError as e:
        click.echo(f"[!]  {e}")
        return
    click.echo("将公钥添加到 GitHub / GitLab / Bitbucket 账户即可使用。")


@click.command(name="status")
@click.pass_obj
def ssh_status(svc: ServiceContainer) -> None:
    """检查 SSH 工具链、agent 与密钥状态"""
    try:
        svc.ssh.check_tools()
        click.echo("[OK] ssh 工具链齐全")
    except SSHError as e:
        click.echo(f"[!]  {e}")

    if svc.ssh.is_agent_running():
        click.echo("[OK] ssh-agent 正在运行")
    else:
        click.echo("[!]  ssh-agent 未运行（SSH_AUTH_SOCK 未设置）")

    _echo_keys(svc)


@click.command(name="list")
@click.pass_obj
def ssh_list(svc: ServiceContainer) -> None:
    """列出本地私钥和 agent 中已加载的密钥"""
    _echo_keys(svc)


def _echo_keys(svc: ServiceContainer) -> None:
    click.echo(f"\n{svc.ssh.ssh_dir} 中的私钥:")
    keys = svc.ssh.list_private_keys()
    if not keys:
        click.echo("  (无)")
    for k in keys:
        click.echo(f"  {k}")

    click.echo("\nssh-agent 中已加载的密钥:")
    try:
        agent_keys = svc.ssh.list_agent_keys()
    except SSHError as e:
        click.echo(f"  [!] {e}")
        return
    if not agent_keys:
        click.echo("  (无)")
    for k in agent_keys:
        click.echo(f"  {k}")


@click.command(name="generate")
@click.option("--algo", "-a", default="ed25519", type=click.Choice(SUPPORTED_ALGOS), help="密钥算法")
@click.option("--name", "-n", default="", help="密钥名称前缀（生成 <name>_id_<algo>）")
@click.pass_obj
def ssh_generate(svc: ServiceContainer, algo: str, name: str) -> None:
    """生成新的 SSH 密钥对"""
    key = svc.ssh.generate_key(algo, name)
    click.echo(f"已生成密钥: {key}")
    click.echo(f"公钥: {key}.pub")


@click.command(name="add-agent")
@_KEY_OPTION
@click.pass_obj
def ssh_add_agent(svc: ServiceContainer, key: str) -> None:
    """将私钥加入 ssh-agent"""
    key = _select_key(svc, key, "加入 agent ")
    if not key:
        return
    svc.ssh.add_key_to_agent(key)
    click.echo(f"已加入 ssh-agent: {key}")


@click.command(name="print-public")
@_KEY_OPTION
@click.pass_obj
def ssh_print_public(svc: ServiceContainer, key: str) -> None:
    """打印公钥"""
    key = _select_key(svc, key, "打印")
    if not key:
        return
    click.echo(f"\n公钥 ({key}.pub):\n{svc.ssh.read_public_key(key)}\n")
    click.echo("将公钥添加到 GitHub / GitLab / Bitbucket 账户即可使用。")


@click.command(name="copy-public")
@_KEY_OPTION
@click.pass_obj
def ssh_copy_public(svc: ServiceContainer, key: str) -> None:
    """复制公钥到剪贴板"""
    key = _select_key(svc, key, "复制")
    if not key:
        return
    pub = svc.ssh.read_public_key(key)
    try:
        pyperclip.copy(pub)
    except pyperclip.PyperclipException as e:
        raise DevManagerError(f"复制到剪贴板失败: {e}") from e
    click.echo("公钥已复制到剪贴板。")


@click.command(name="remove")
@_KEY_OPTION
@click.option("--yes", "-y", is_flag=True, help="跳过确认")
@click.pass_obj
def ssh_remove(svc: ServiceContainer, key: str, yes: bool) -> None:
    """从 agent 移除并删除密钥文件"""
    key = _select_key(svc, key, "删除")
    if not key:
        return
    if not yes and not svc.prompter.confirm(
        f"确定从 agent 移除并删除密钥 {key}？", default=False,
    ):
        click.echo("已取消。")
        return
    for f in svc.ssh.remove_key(key):
        click.echo(f"已删除: {f}")


COMMANDS = [
    ssh_init, ssh_status, ssh_list, ssh_generate, ssh_add_agent,
    ssh_print_public, ssh_copy_public, ssh_remove,
]
