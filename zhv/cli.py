"""Command line interface: suggest names and manage settings."""

from __future__ import annotations

import argparse
import os
import platform
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from zhv.config import load_config, save_config
from zhv.converter import ConversionError, Converter

__version__ = "dev"
BUILD_TIME = "unknown"
GIT_COMMIT = "unknown"

_STYLE_DESCRIPTIONS = {
    "camel": "驼峰命名法 (camelCase)",
    "pascal": "帕斯卡命名法 (PascalCase)",
    "snake": "蛇形命名法 (snake_case)",
    "kebab": "短横线命名法 (kebab-case)",
}

_CONFIG_FIELDS = frozenset(("api_url", "model", "api_key"))

_INCOMPLETE_CONFIG = """配置不完整，请设置以下配置：

方式1 - 使用环境变量：
  export ZHV_API_URL="your-api-url"
  export ZHV_MODEL="your-model"  
  export ZHV_KEY="your-api-key"

方式2 - 使用配置文件：
  zhv config set api_url "your-api-url"
  zhv config set model "your-model"
  zhv config set api_key "your-api-key"

方式3 - 查看当前配置：
  zhv config show"""

_DESCRIPTION = """ZHV (中文变量) 是一个帮助开发者将中文词汇转换为符合编程规范的英文变量名的工具。

支持多种命名风格：
  - camel: 驼峰命名法 (userName)
  - pascal: 帕斯卡命名法 (UserName)
  - snake: 蛇形命名法 (user_name)
  - kebab: 短横线命名法 (user-name)

子命令：
  config set [key] [value]  设置配置项 (api_url, model, api_key)
  config show               显示当前配置
  version                   显示版本信息

配置方式：
  1. 环境变量：ZHV_API_URL, ZHV_MODEL, ZHV_KEY
  2. 配置文件：~/.zhv/setting.json

示例：
  zhv 用户名称
  zhv -s snake 数据库连接
  zhv -s pascal "文件上传状态\""""

_CONFIG_HELP = """管理ZHV的配置信息

用法:
  zhv config set [key] [value]   设置配置项 (api_url, model, api_key)
  zhv config show                显示当前配置"""

PathLike = Union[str, "os.PathLike[str]", None]


class _CommandError(Exception):
    """A failure reported to the user with a short message."""


def mask_api_key(key: str) -> str:
    """Hide all but the first and last four characters of a key."""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


def style_description(style: str) -> str:
    """Describe a naming style; unknown styles are treated as camel case."""
    return _STYLE_DESCRIPTIONS.get(style, _STYLE_DESCRIPTIONS["camel"])


def set_config(key: str, value: str, path: PathLike = None) -> Path:
    """Change one setting and save the configuration; return the file written."""
    if key not in _CONFIG_FIELDS:
        raise ValueError(f"未知的配置项: {key}")
    config = load_config(path)
    setattr(config, key, value)
    return save_config(config, path)


def show_config(path: PathLike = None) -> None:
    """Print the effective configuration with the key masked."""
    config = load_config(path)
    print("当前配置:")
    print(f"  API地址: {config.api_url}")
    print(f"  模型: {config.model}")
    if config.api_key:
        print(f"  API密钥: {mask_api_key(config.api_key)}")
    else:
        print("  API密钥: (未设置)")
    print("\n配置状态: ", end="")
    print("✓ 配置完整" if config.is_valid() else "✗ 配置不完整")


def _version_text() -> str:
    """Build the version report shown by the version command."""
    lines = [
        "ZHV (中文变量名推荐工具)",
        f"版本: {__version__}",
        f"构建时间: {BUILD_TIME}",
        f"Git提交: {GIT_COMMIT}",
        f"Python版本: {platform.python_version()}",
        f"平台: {sys.platform}/{platform.machine()}",
    ]
    return "\n".join(lines)


def _convert_and_display(chinese_text: str, style: str, verbose: bool) -> None:
    config = load_config()
    if not config.is_valid():
        raise _CommandError(_INCOMPLETE_CONFIG)

    if verbose:
        print(f"使用配置: API={config.api_url}, Model={config.model}")
        print(f"转换文本: {chinese_text}")
        print(f"命名风格: {style}\n")

    converter = Converter(config)
    print(f"中文: {chinese_text}")
    print(f"风格: {style_description(style)}")
    print("正在生成变量名推荐...")
    print()

    started = False

    def on_content(text: str) -> None:
        nonlocal started
        if not started:
            print("AI回复: ")
            started = True
        print(text, end="", flush=True)

    def on_complete(results: list[str]) -> None:
        print()
        if not results:
            print("未找到合适的变量名推荐")
            return
        print("推荐的变量名:")
        for number, name in enumerate(results, 1):
            print(f"  {number}. {name}")

    try:
        converter.convert_stream(chinese_text, style, on_content, on_complete)
    except ConversionError as exc:
        raise _CommandError(f"转换失败: {exc}") from exc


def _config_command(args: Sequence[str]) -> int:
    if not args:
        print(_CONFIG_HELP)
        return 0
    action, rest = args[0], list(args[1:])
    if action == "set":
        if len(rest) != 2:
            print(f"执行命令失败: 需要 2 个参数，收到 {len(rest)} 个", file=sys.stderr)
            return 1
        key, value = rest
        try:
            set_config(key, value)
        except (ValueError, OSError) as exc:
            print(f"设置配置失败: {exc}", file=sys.stderr)
            return 1
        print(f"配置 {key} 已设置")
        return 0
    if action == "show":
        try:
            show_config()
        except OSError as exc:
            print(f"显示配置失败: {exc}", file=sys.stderr)
            return 1
        return 0
    print(f'执行命令失败: 未知命令 "{action}"', file=sys.stderr)
    return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zhv",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-s", "--style", default="camel", help="命名风格 (camel|pascal|snake|kebab)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="详细输出")
    parser.add_argument("words", nargs="*", metavar="中文文本")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line and return its exit status."""
    parser = _build_parser()
    args = parser.parse_intermixed_args(argv)
    words = args.words
    if not words:
        parser.print_usage(sys.stderr)
        print("执行命令失败: 至少需要 1 个参数", file=sys.stderr)
        return 1

    command = words[0]
    if command == "config":
        return _config_command(words[1:])
    if command == "version":
        print(_version_text())
        return 0

    try:
        _convert_and_display(" ".join(words), args.style, args.verbose)
    except _CommandError as exc:
        print(f"错误: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"错误: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())