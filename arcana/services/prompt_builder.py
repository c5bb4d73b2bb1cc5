"""Construct the system/user prompts for a tarot reading.

The user prompt is deterministic for a given question, spread and hand:
* the question, or a default topic when it is blank;
* the spread's display name;
* one line per drawn card in hand order with position, orientation and the
  orientation-appropriate meaning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from arcana.domain import CardInstance, Spread

DEFAULT_QUESTION = "近期指引"

SYSTEM_PROMPT = "你是一位专业、神秘且语气温和的塔罗牌占卜师。"

# Formatting rules the reader must follow so the text can also be spoken aloud.
FORMAT_RULES = (
    "请注意严格遵守以下格式要求：\n"
    "1. 绝对禁止使用 Markdown 格式（如加粗、斜体等），请只输出纯文本。\n"
    "2. 绝对禁止使用括号来标注正逆位，提及牌名时必须且只能使用“正位XX”或“逆位XX”的格式。\n"
    "3. 不要在回复中出现像 (6R) 这样令人困惑的缩写符号。\n"
    "4. 语气要温暖、治愈且富有洞察力，字数控制在 300 字以内。"
)


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


def describe_cards(spread: Spread, cards: Sequence[CardInstance]) -> str:
    """One numbered line per card, e.g. ``1. [过去] - 逆位愚者: 鲁莽...``."""

    lines = []
    for idx, instance in enumerate(cards):
        position = spread.positions[idx].name
        lines.append(
            f"{idx + 1}. [{position}] - {instance.orientation_label}"
            f"{instance.card.short_name}: {instance.meaning}"
        )
    return "\n".join(lines)


def build_reading_prompt(
    question: str,
    spread: Spread,
    cards: Sequence[CardInstance],
) -> PromptBundle:
    """Compose system/user prompts for a drawn hand."""

    topic = question.strip() if question and question.strip() else DEFAULT_QUESTION
    user_prompt = (
        "请根据以下信息为用户进行解读：\n"
        f"用户问题：“{topic}”\n"
        f"牌阵：{spread.name}\n"
        "抽取的牌面：\n"
        f"{describe_cards(spread, cards)}\n\n"
        f"{FORMAT_RULES}\n"
        "请开始你的解读："
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)


__all__ = ["DEFAULT_QUESTION", "PromptBundle", "build_reading_prompt", "describe_cards"]
