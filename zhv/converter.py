"""Turns Chinese phrases into English variable name suggestions."""

from __future__ import annotations

import re
import string
from typing import Callable, Optional

from zhv.client import APIError, Message, OpenAIClient
from zhv.config import Config

SYSTEM_PROMPT = (
    "你是一位资深的软件工程师和编程规范专家，精通多种编程语言的命名约定。"
    "你的任务是将中文概念准确转换为地道的英文变量名，确保：1) 语义准确表达原始概念；"
    "2) 遵循目标命名风格；3) 符合国际编程最佳实践；4) 使用简洁明了的英语词汇；"
    "5）请不要回复无关的信息，仅回复变量名，不要回复任何其他信息。"
)

MAX_NAME_LENGTH = 50

_STYLES = {
    "camel": ("驼峰命名法 (camelCase)", "userName, userProfile, dataCount, isActive"),
    "pascal": ("帕斯卡命名法 (PascalCase)", "UserName, UserProfile, DataCount, IsActive"),
    "snake": ("蛇形命名法 (snake_case)", "user_name, user_profile, data_count, is_active"),
    "kebab": ("短横线命名法 (kebab-case)", "user-name, user-profile, data-count, is-active"),
}

_PROMPT_TEMPLATE = """作为专业的变量命名助手，为中文词汇"{text}"生成高质量的英文变量名。

## 要求
- 命名风格: {style}
- 参考示例: {examples}
- 生成3-5个选项
- 使用地道英语，避免中式英语
- 符合编程最佳实践

## 输出格式
每行一个变量名，格式: 变量名 - 说明
示例:
userName - 用户名称
accountName - 账户名称
userAccount - 用户账户

## 命名原则
1. 语义准确: 准确表达概念含义
2. 简洁明了: 避免冗长或复杂的词汇
3. 约定俗成: 使用业界通用术语
4. 上下文适配: 考虑在代码中的使用场景

现在开始生成变量名:"""

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_-")
_NUMBER_PREFIX = re.compile(r"^(?:10|[1-9])\. ")


class ConversionError(Exception):
    """Raised when no suggestion could be obtained from the API."""


def build_prompt(chinese_text: str, style: str) -> str:
    """Build the user prompt asking for names in the given style."""
    style_desc, examples = _STYLES.get(style, _STYLES["camel"])
    return _PROMPT_TEMPLATE.format(text=chinese_text, style=style_desc, examples=examples)


def is_valid_variable_name(name: str) -> bool:
    """Check that ``name`` looks like an ASCII identifier of sensible length."""
    if not name:
        return False
    if any(char not in _NAME_CHARS for char in name):
        return False
    if name[0].isdigit():
        return False
    return len(name) <= MAX_NAME_LENGTH


def _strip_prefixes(line: str) -> str:
    for bullet in ("- ", "• "):
        if line.startswith(bullet):
            line = line[len(bullet):]
    return _NUMBER_PREFIX.sub("", line, count=1)


def parse_response(content: str) -> list[str]:
    """Extract variable names from a reply of ``name - description`` lines.

    When nothing usable is found, the whole reply is returned on one line.
    """
    results = []
    for raw in content.split("\n"):
        line = raw.strip()
        if not line:
            continue
        line = _strip_prefixes(line)
        parts = line.split(" - ")
        if len(parts) >= 2:
            name = parts[0].strip()
            if is_valid_variable_name(name):
                results.append(name)
        elif is_valid_variable_name(line):
            results.append(line)

    if not results:
        cleaned = content.replace("\n", " ").strip()
        if cleaned:
            results.append(cleaned)
    return results


def _messages(chinese_text: str, style: str) -> list[Message]:
    return [
        Message(role="system", content=SYSTEM_PROMPT),
        Message(role="user", content=build_prompt(chinese_text, style)),
    ]


class Converter:
    """Asks a chat model for variable names matching a Chinese phrase."""

    def __init__(self, config: Config, client: Optional[OpenAIClient] = None) -> None:
        self.client = client if client is not None else OpenAIClient(config)

    def convert(self, chinese_text: str, style: str) -> list[str]:
        """Return suggested names from a single, non-streamed request."""
        try:
            response = self.client.chat(_messages(chinese_text, style))
        except APIError as exc:
            raise ConversionError(f"AI请求失败: {exc}") from exc
        if not response.choices:
            raise ConversionError("AI未返回有效响应")
        return parse_response(response.choices[0].message.content)

    def convert_stream(
        self,
        chinese_text: str,
        style: str,
        on_content: Callable[[str], None],
        on_complete: Callable[[list[str]], None],
    ) -> list[str]:
        """Stream the reply to ``on_content``, then pass the parsed names to ``on_complete``.

        The parsed names are also returned.
        """
        pieces = []
        try:
            for chunk in self.client.chat_stream(_messages(chinese_text, style)):
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    pieces.append(text)
                    on_content(text)
        except APIError as exc:
            raise ConversionError(f"AI流式请求失败: {exc}") from exc
        results = parse_response("".join(pieces))
        on_complete(results)
        return results