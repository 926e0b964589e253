"""
gitcmp 命令行入口

比较两个远程 Git 仓库的 ref。

用法示例:
    $ gitcmp https://github.com/bradfitz/camlistore.git https://camlistore.googlesource.com/camlistore
    refs/heads/master differs: b38077ff0fecee907d8b1338f904ccc97b9d0f2a vs. 90d1df956f50431fdd41979b37c164be1daf2488
    Only in https://github.com/bradfitz/camlistore.git: refs/pull/9/head

退出码: 0 = 完全一致, 1 = 存在差异, 2 = 用法/配置错误, 3 = 获取失败。
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import GitcmpConfig, load_config_from_env, load_config_from_toml
from .core import compare_repositories
from .exceptions import ConfigError, GitcmpError

logger = logging.getLogger("gitcmp")

EXIT_IDENTICAL = 0
EXIT_DIFFERS = 1
EXIT_USAGE = 2
EXIT_FETCH_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitcmp",
        description="Compare the refs advertised by two remote Git repositories.",
    )
    parser.add_argument("repo1")
    parser.add_argument("repo2")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    parser.add_argument(
        "--profile", default="default", help="profile inside the configuration file"
    )
    parser.add_argument("--timeout", type=float, help="per-request timeout in seconds")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def resolve_config(args: argparse.Namespace) -> GitcmpConfig:
    """按优先级确定配置: --config 文件 > GITCMP_ 环境变量 > 默认值。

    --timeout 总是覆盖前面得到的值。
    """
    if args.config is not None:
        config = load_config_from_toml(args.config, args.profile)
    elif any(key.startswith("GITCMP_") for key in os.environ):
        config = load_config_from_env()
    else:
        config = GitcmpConfig()

    if args.timeout is not None:
        if args.timeout <= 0:
            raise ConfigError(f"timeout 必须为正数: {args.timeout}")
        config = GitcmpConfig(
            timeout=args.timeout,
            user_agent=config.user_agent,
            max_body_bytes=config.max_body_bytes,
            extra_headers=config.extra_headers,
        )
    return config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    # 参数个数不对时 argparse 会打印 usage 并以 2 退出
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        logger.debug(f"已加载 {env_path}")

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"gitcmp: {e}", file=sys.stderr)
        return EXIT_USAGE
    logger.debug(f"配置: {config!r}")

    try:
        result = compare_repositories(args.repo1, args.repo2, config)
    except GitcmpError as e:
        print(e, file=sys.stderr)
        return EXIT_FETCH_FAILED

    for line in result.report_lines():
        print(line)

    return EXIT_IDENTICAL if result.identical else EXIT_DIFFERS


if __name__ == "__main__":
    sys.exit(main())
