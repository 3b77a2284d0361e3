# src/rcon_core/main.py
"""
RCON-Core 命令行入口 (CLI)

加载配置 -> 连接 -> 认证 -> 逐条执行命令 -> 关闭。
未通过 -c 指定命令时，从标准输入逐行读取命令，直到 EOF 或输入 exit。
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import __version__
from .config import RconConfig, load_config_from_env, load_config_from_toml
from .core import RconSession
from .exceptions import RconError

logger = logging.getLogger("RconCLI")

EXIT_COMMANDS = ("exit", "quit")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcon-core", description="Source RCON 远程管理客户端"
    )
    parser.add_argument("--config", type=Path, help="TOML 配置文件路径")
    parser.add_argument("--profile", default="default", help="TOML 配置预设名")
    parser.add_argument(
        "--env-file", type=Path, help=".env 文件路径 (默认查找当前目录)"
    )
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        dest="commands",
        help="要执行的命令，可重复指定",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def load_cli_config(args: argparse.Namespace) -> RconConfig:
    """
    为 CLI 工具加载配置。
    优先使用 --config 指定的 TOML 文件，否则加载 .env 并从环境变量读取。
    """
    if args.config:
        logger.info(f"CLI: 从 {args.config} 加载配置 (profile={args.profile})")
        return load_config_from_toml(args.config, args.profile)

    env_path = args.env_file or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=True)
        logger.debug(f"已加载配置文件: {env_path}")
    elif args.env_file:
        logger.warning(f"未找到 .env 文件: {env_path}")

    return load_config_from_env()


async def read_stdin_commands() -> AsyncIterator[str]:
    """在工作线程中逐行读取标准输入，避免阻塞事件循环。"""
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            break
        command = line.strip()
        if not command:
            continue
        if command.lower() in EXIT_COMMANDS:
            break
        yield command


async def run_commands(
    config: RconConfig, commands: Optional[Iterable[str]] = None
) -> None:
    """连接、认证并依次执行命令，结果输出到标准输出。

    commands 为 None 时从标准输入读取。
    """
    async with RconSession(config) as session:
        if not await session.authenticate():
            raise RconError("认证未完成: 服务器返回了异常的响应 ID")

        if commands is None:
            async for command in read_stdin_commands():
                print(await session.execute_command(command))
            return

        for command in commands:
            result = await session.execute_command(command)
            print(result)


def main(argv: Optional[list[str]] = None) -> int:
    """
    程序主入口点。
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_cli_config(args)
        logger.debug(f"配置加载完成: {config!r}")
        asyncio.run(run_commands(config, args.commands))
    except RconError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"错误: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("收到用户中断信号 (Ctrl+C)，准备退出...")
        return 130

    return 0


# 程序入口
if __name__ == "__main__":
    sys.exit(main())
