"""Read-only deck and spread catalog."""

from __future__ import annotations

from functools import lru_cache

from .models import (
    Arcana,
    CardDefinition,
    Element,
    Icon,
    LayoutKind,
    Spread,
    SpreadPosition,
)

_MAJORS: tuple[CardDefinition, ...] = tuple(
    CardDefinition(id=card_id, name=name, icon=icon, element=element, upright=upright, reversed=reversed_)
    for card_id, name, icon, element, upright, reversed_ in (
        (0, "愚者 (The Fool)", Icon.GHOST, Element.AIR, "新的开始、冒险、天真、自由", "鲁莽、冒险过度、不成熟"),
        (1, "魔术师 (The Magician)", Icon.SPARKLES, Element.AIR, "创造力、技能、意志力、自信", "欺骗、缺乏想象力、滥用能力"),
        (2, "女祭司 (High Priestess)", Icon.MOON, Element.WATER, "直觉、潜意识、神秘、智慧", "情绪不稳定、缺乏洞察力、肤浅"),
        (3, "皇后 (The Empress)", Icon.HEART, Element.EARTH, "丰收、母性、自然、繁荣", "依赖、创造力受阻、家庭问题"),
        (4, "皇帝 (The Emperor)", Icon.CROWN, Element.FIRE, "权威、结构、控制、父亲形象", "专制、僵化、缺乏纪律"),
        (5, "教皇 (The Hierophant)", Icon.ANCHOR, Element.EARTH, "传统、精神指引、信仰、学习", "挑战传统、盲目信仰、叛逆"),
        (6, "恋人 (The Lovers)", Icon.HEART, Element.AIR, "爱、和谐、关系、价值观选择", "不和谐、分离、错误的选择"),
        (7, "战车 (The Chariot)", Icon.SWORD, Element.WATER, "胜利、意志力、自律、决心", "失控、攻击性、缺乏方向"),
        (8, "力量 (Strength)", Icon.ZAP, Element.FIRE, "勇气、耐心、控制、同情心", "自我怀疑、软弱、不安全感"),
        (9, "隐士 (The Hermit)", Icon.EYE, Element.EARTH, "内省、孤独、寻求真理、指引", "孤立、孤独、退缩"),
        (10, "命运之轮 (Wheel of Fortune)", Icon.REFRESH, Element.FIRE, "改变、周期、命运、转折点", "坏运气、阻力、不受控制的改变"),
        (11, "正义 (Justice)", Icon.SCALE, Element.AIR, "公正、真理、因果、法律", "不公、偏见、逃避责任"),
        (12, "倒吊人 (The Hanged Man)", Icon.ANCHOR, Element.WATER, "牺牲、放下、新视角、等待", "停滞、无谓的牺牲、拖延"),
        (13, "死神 (Death)", Icon.SKULL, Element.WATER, "结束、转变、重生、新阶段", "抗拒改变、停滞、无法释怀"),
        (14, "节制 (Temperance)", Icon.CLOUD, Element.FIRE, "平衡、适度、耐心、目的", "失衡、过度、缺乏长远眼光"),
        (15, "恶魔 (The Devil)", Icon.GHOST, Element.EARTH, "束缚、物质主义、上瘾、欲望", "打破束缚、重获自由、面对阴暗面"),
        (16, "高塔 (The Tower)", Icon.ZAP, Element.FIRE, "突变、混乱、启示、觉醒", "避免灾难、恐惧改变、延迟的危机"),
        (17, "星星 (The Star)", Icon.STAR, Element.AIR, "希望、灵感、宁静、精神力量", "绝望、缺乏信心、消极"),
        (18, "月亮 (The Moon)", Icon.MOON, Element.WATER, "幻觉、恐惧、潜意识、不安", "释放恐惧、清晰、混乱平息"),
        (19, "太阳 (The Sun)", Icon.SUN, Element.FIRE, "快乐、成功、活力、积极", "暂时的消极、缺乏热情、不切实际"),
        (20, "审判 (Judgement)", Icon.SCALE, Element.FIRE, "重生、觉醒、原谅、召唤", "自我怀疑、拒绝改变、悔恨"),
        (21, "世界 (The World)", Icon.GLOBE, Element.EARTH, "完成、整合、成就、旅行", "未完成、缺乏封闭、停滞"),
    )
)

# (suit, display name, element, icon, keywords)
_SUITS = (
    ("Wands", "权杖", Element.FIRE, Icon.WAND, "行动、创意"),
    ("Cups", "圣杯", Element.WATER, Icon.HEART, "情感、直觉"),
    ("Swords", "宝剑", Element.AIR, Icon.SWORD, "思想、理智"),
    ("Pentacles", "星币", Element.EARTH, Icon.COINS, "物质、现实"),
)
_RANKS = ("Ace", "2", "3", "4", "5", "6", "7", "8", "9", "10", "Page", "Knight", "Queen", "King")
_COURT_RANKS = frozenset({"Page", "Knight", "Queen", "King"})

DECK_INFO = {
    "major": "大阿卡纳 (22张)：象征人生重大课题与精神原型。适合宏观方向指引。",
    "full": "完整塔罗 (78张)：加入56张小阿卡纳（权杖/圣杯/宝剑/星币），补充生活细节与情感流动。",
}


def _build_minors() -> tuple[CardDefinition, ...]:
    minors: list[CardDefinition] = []
    card_id = len(_MAJORS)
    for suit, suit_name, element, icon, keywords in _SUITS:
        for rank in _RANKS:
            upright = f"{keywords}，正向发展"
            if rank == "Ace":
                upright = f"{suit_name}的新开始，能量涌动"
            elif rank in _COURT_RANKS:
                upright = f"宫廷牌：{suit_name}领域的人物或特质"
            minors.append(
                CardDefinition(
                    id=card_id,
                    name=f"{suit_name}{rank}",
                    icon=icon,
                    element=element,
                    upright=upright,
                    reversed=f"{keywords}，受阻或过度",
                    arcana=Arcana.MINOR,
                    suit=suit,
                    rank=rank,
                )
            )
            card_id += 1
    return tuple(minors)


_FULL_DECK: tuple[CardDefinition, ...] = _MAJORS + _build_minors()

_SPREADS: tuple[Spread, ...] = (
    Spread(
        id="single",
        name="每日指引",
        en_name="Daily",
        icon=Icon.CIRCLE,
        description="单张牌，今日的核心课题。",
        card_count=1,
        positions=(SpreadPosition(id=0, name="指引", desc="当下的核心能量"),),
        layout=LayoutKind.SINGLE,
    ),
    Spread(
        id="triangle",
        name="圣三角",
        en_name="Triangle",
        icon=Icon.LAYOUT,
        description="过去、现在与未来的流向。",
        card_count=3,
        positions=(
            SpreadPosition(id=0, name="过去", desc="根源与经验"),
            SpreadPosition(id=1, name="现在", desc="现状与挑战"),
            SpreadPosition(id=2, name="未来", desc="趋势与结果"),
        ),
        layout=LayoutKind.ROW,
    ),
    Spread(
        id="diamond",
        name="钻石阵",
        en_name="Diamond",
        icon=Icon.GRID,
        description="全方位的深入分析。",
        card_count=5,
        positions=(
            SpreadPosition(id=0, name="现状", desc="真实状态"),
            SpreadPosition(id=1, name="阻碍", desc="挑战"),
            SpreadPosition(id=2, name="建议", desc="应对智慧"),
            SpreadPosition(id=3, name="基础", desc="潜意识"),
            SpreadPosition(id=4, name="结果", desc="最终导向"),
        ),
        layout=LayoutKind.DIAMOND,
    ),
)


def list_card_definitions(full_deck: bool) -> tuple[CardDefinition, ...]:
    """Return the 22 major arcana, or all 78 cards when ``full_deck`` is set."""

    return _FULL_DECK if full_deck else _MAJORS


def list_spreads() -> tuple[Spread, ...]:
    return _SPREADS


@lru_cache(maxsize=None)
def get_spread(spread_id: str) -> Spread:
    """Look up a spread by id; raises ``KeyError`` when it does not exist."""

    for spread in _SPREADS:
        if spread.id == spread_id:
            return spread
    raise KeyError(spread_id)


__all__ = ["DECK_INFO", "get_spread", "list_card_definitions", "list_spreads"]
