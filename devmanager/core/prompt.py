"""交互端口 — 命令执行中途向用户提问

核心逻辑只依赖 Prompter 协议；CLI 注入基于 click 的实现，
测试注入预设答案的实现，无需真实终端。
"""

from __future__ import annotations

from typing import Protocol

import click


class Prompter(Protocol):
    """向用户提问的能力接口"""

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """是/否确认"""
        ...

    def choose(self, message: str, options: list[str]) -> int | None:
        """从选项中选择一项，返回下标；用户直接回车放弃时返回 None"""
        ...

    def ask(self, message: str, *, default: str = "") -> str:
        """自由文本输入；直接回车时返回 default"""
        ...


class ClickPrompter:
    """基于 click 的终端交互实现"""

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return click.confirm(message, default=default)

    def choose(self, message: str, options: list[str]) -> int | None:
        for i, opt in enumerate(options, start=1):
            click.echo(f"  [{i}] {opt}")
        while True:
            raw = click.prompt(
                f"{message}（输入编号，直接回车放弃）",
                default="", show_default=False,
            ).strip()
            if not raw:
                return None
            if raw.isdigit() and 1 <= int(raw) <= len(options):
                return int(raw) - 1
            click.echo(f"无效的编号: {raw}", err=True)

    def ask(self, message: str, *, default: str = "") -> str:
        if default:
            return str(click.prompt(message, default=default)).strip()
        return str(click.prompt(message)).strip()
