"""Divination calculation layer — trigram arithmetic, element relations, and reading assembly.

Everything here is pure: the same DivinationInput (and, for unparseable times,
the same `now`) always yields the same DivinationResult.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from omnifind.models import Direction, DivinationInput, DivinationResult

_logger = logging.getLogger(__name__)

SUPPORTED_LANGS = ("zh", "en")

# Small Liu Ren states, in cycle order.
CYCLE_STATES = ("大安", "留连", "速喜", "赤口", "小吉", "空亡")
CYCLE_STATES_EN = ("Great Peace", "Lingering", "Swift Joy", "Red Mouth", "Small Luck", "Void")
PEACE_INDEX = 0
VOID_INDEX = 5

# Two-hour periods, indexed by hour_branch().
PERIOD_NAMES = ("子时", "丑时", "寅时", "卯时", "辰时", "巳时", "午时", "未时", "申时", "酉时", "戌时", "亥时")
PERIOD_NAMES_EN = ("Rat", "Ox", "Tiger", "Rabbit", "Dragon", "Snake", "Horse", "Goat", "Monkey", "Rooster", "Dog", "Pig")

# Trigrams 1..8 (index 0 unused).
TRIGRAM_NAMES = ("", "乾天", "兑泽", "离火", "震雷", "巽风", "坎水", "艮山", "坤地")
TRIGRAM_NAMES_EN = ("", "Heaven", "Lake", "Fire", "Thunder", "Wind", "Water", "Mountain", "Earth")
TRIGRAM_ELEMENTS = ("", "Metal", "Metal", "Fire", "Wood", "Wood", "Water", "Earth", "Earth")

ELEMENTS_ZH: dict[str, str] = {
    "Metal": "金",
    "Wood": "木",
    "Water": "水",
    "Fire": "火",
    "Earth": "土",
}

# (ti, yong) pairs where the seeker's element controls the item's.
_TI_CONTROLS_YONG = frozenset({("Metal", "Wood"), ("Wood", "Earth"), ("Water", "Fire")})
# (ti, yong) pairs where the item's element feeds the seeker's.
_YONG_SUPPORTS_TI = frozenset({("Metal", "Earth"), ("Wood", "Water"), ("Water", "Metal")})


@dataclass(frozen=True)
class DirectionInfo:
    name: str
    name_en: str
    element: str
    feature: str
    feature_en: str


DIRECTIONS: dict[Direction, DirectionInfo] = {
    Direction.NORTH: DirectionInfo("正北", "North", "Water", "阴凉、低洼、有水或黑色物体处", "cool, low-lying, watery or black-colored area"),
    Direction.SOUTH: DirectionInfo("正南", "South", "Fire", "明亮、高处、燥热、红色或电器旁", "bright, high, hot, red-colored or near electronics"),
    Direction.EAST: DirectionInfo("正东", "East", "Wood", "花草、木家具、高大、青绿色物体处", "plants, wooden furniture, tall or green objects"),
    Direction.WEST: DirectionInfo("正西", "West", "Metal", "金属、钱柜、白色或坚硬物体旁", "metal, safes, white or hard objects"),
    Direction.NORTHEAST: DirectionInfo("东北", "Northeast", "Earth", "墙角、山坡、黄色物体或堆积物处", "corners, slopes, yellow objects or storage piles"),
    Direction.NORTHWEST: DirectionInfo("西北", "Northwest", "Metal", "贵重物品旁、圆形或高大建筑内", "near valuables, circular or tall structures"),
    Direction.SOUTHEAST: DirectionInfo("东南", "Southeast", "Wood", "风口、过道、细长物体或木艺旁", "breezy spots, corridors, slender objects or woodwork"),
    Direction.SOUTHWEST: DirectionInfo("西南", "Southwest", "Earth", "储藏室、低矮、柔软物体或布料处", "storage rooms, low-lying areas, soft objects or fabrics"),
    Direction.CENTER: DirectionInfo("中央", "Center", "Earth", "屋宅中心、桌几、土石堆旁", "center of the room, tables, or near piles of stones"),
}


@dataclass(frozen=True)
class LocationInfo:
    element: str
    desc: str
    desc_en: str
    feature: str
    feature_en: str


_TRANSIT_PATTERN = re.compile(r"地铁|车|交通|路|Subway|Car|Bus|Road")
_DWELLING_PATTERN = re.compile(r"朋友|家|酒店|饭店|室内|Home|Hotel|Room")

_TRANSIT = LocationInfo(
    "Metal",
    "金能克木，物在动处。",
    "Metal controls Wood. Item is in motion.",
    "物在金属构件、机械或交通枢纽旁。",
    "Item is near metal components, machinery, or transit hubs.",
)
_DWELLING = LocationInfo(
    "Earth",
    "土能生金，物在隐蔽。",
    "Earth creates Metal. Item is hidden.",
    "物在稳固建筑内、墙角或柜底。",
    "Item is inside stable structures, corners, or under cabinets.",
)
_OPEN = LocationInfo(
    "Fire",
    "火能炼金，物在显处。",
    "Fire refines Metal. Item is visible.",
    "物在明亮、温暖或电器、光照充足处。",
    "Item is in bright, warm areas or near electronics/light.",
)


class Relation(Enum):
    """Ti/Yong element relationship. Value is the base retrieval probability."""

    HARMONIOUS = 85
    DOMINATING = 75
    SUPPORTING = 92
    EXHAUSTING = 45


_RELATION_TEXT: dict[Relation, tuple[str, str, str, str]] = {
    Relation.HARMONIOUS: (
        "体用比和",
        "Harmonious Essence",
        "【白话】寻物大吉。物体与周围环境颜色或性质非常接近，就在你认为最可能的地方。",
        "Excellent luck. The item matches its surroundings closely, check the most obvious spot.",
    ),
    Relation.DOMINATING: (
        "体克用",
        "Dominating Force",
        "【白话】虽然寻找有些费劲，但最终能找回。物体可能被盖住了。",
        "Takes effort but will be found. The item might be covered by something else.",
    ),
    Relation.SUPPORTING: (
        "用生体",
        "Supporting Flow",
        "【白话】易找。甚至会有他人提醒或者在你不经意间发现。",
        "Easy to find. Someone might assist you, or you will find it unexpectedly.",
    ),
    Relation.EXHAUSTING: (
        "体生用",
        "Exhausting Energy",
        "【白话】寻物波折较多。可能耗费额外精力，结果未必如愿。",
        "Challenging search. May require significant energy with uncertain results.",
    ),
}


def mod_or_n(x: int, n: int) -> int:
    """Reduce x into 1..n, mapping multiples of n to n rather than 0."""
    return ((x - 1) % n) + 1


def hour_branch(hour: int) -> int:
    """Two-hour earthly branch index (0=子 covers 23:00-00:59)."""
    return ((hour + 1) % 24) // 2


def period_name(hour: int, lang: str) -> str:
    """Name of the two-hour period containing `hour`."""
    names = PERIOD_NAMES_EN if lang == "en" else PERIOD_NAMES
    return names[hour_branch(hour)]


def parse_lost_time(lost_time: str) -> datetime | None:
    """Parse an ISO local datetime string. Returns None if unparseable."""
    try:
        return datetime.fromisoformat(lost_time.strip())
    except (AttributeError, ValueError):
        return None


def classify_relation(ti: str, yong: str) -> Relation:
    """Classify the Ti (seeker) / Yong (item) element pair.

    Checked in fixed precedence: equal, Ti controls Yong, Yong supports Ti,
    otherwise Ti is drained into Yong.
    """
    if ti == yong:
        return Relation.HARMONIOUS
    if (ti, yong) in _TI_CONTROLS_YONG:
        return Relation.DOMINATING
    if (ti, yong) in _YONG_SUPPORTS_TI:
        return Relation.SUPPORTING
    return Relation.EXHAUSTING


def classify_location(lost_location: str) -> LocationInfo:
    """Pick the location reading by keyword. Transit is checked before dwelling."""
    if _TRANSIT_PATTERN.search(lost_location):
        return _TRANSIT
    if _DWELLING_PATTERN.search(lost_location):
        return _DWELLING
    return _OPEN


def cycle_index(month: int, day: int, branch: int) -> int:
    """Small Liu Ren position: month, day and hour counted on from 大安."""
    return (month + day + (branch + 1) - 2) % 6


def adjust_for_cycle(probability: int, index: int) -> int:
    if index == VOID_INDEX:
        return max(12, probability - 50)
    if index == PEACE_INDEX:
        return min(98, probability + 10)
    return probability


def cycle_state_index(result: DivinationResult) -> int | None:
    """Recover which Small Liu Ren state a stored result shows."""
    for i, (zh, en) in enumerate(zip(CYCLE_STATES, CYCLE_STATES_EN)):
        if zh in result.xiaoliuren or en in result.xiaoliuren_en:
            return i
    return None


def compute(
    query: DivinationInput,
    lang: str = "zh",
    now: datetime | None = None,
) -> DivinationResult:
    """Run the lost-item divination for one input.

    Args:
        query: User input. `item_name` is expected to be non-empty.
        lang: Language the reading is requested in ('zh' or 'en'). Both
            languages are always rendered; this is recorded on the result.
        now: Clock used for day/month when `lost_time` does not parse.
            Defaults to the current local time.

    Returns:
        DivinationResult with probability in 12..98 and non-empty texts.
    """
    when = parse_lost_time(query.lost_time)
    if when is None:
        _logger.warning("Unparseable lost_time %r; using hour 0", query.lost_time)
        fallback = now or datetime.now()
        hour, day, month = 0, fallback.day, fallback.month
    else:
        hour, day, month = when.hour, when.day, when.month

    branch = hour_branch(hour)
    direction = DIRECTIONS[Direction.coerce(query.direction)]
    location = classify_location(query.lost_location)

    item_weight = len(query.item_name)
    upper = mod_or_n(item_weight + hour + month, 8)
    lower = mod_or_n(item_weight + hour + day + month, 8)
    moving_line = mod_or_n(item_weight + hour + day + month + branch + 1, 6)

    # Upper-half moving line: the lower trigram is the seeker.
    if moving_line > 3:
        ti_num, yong_num = lower, upper
    else:
        ti_num, yong_num = upper, lower
    ti = TRIGRAM_ELEMENTS[ti_num]
    yong = TRIGRAM_ELEMENTS[yong_num]

    relation = classify_relation(ti, yong)
    theory, theory_en, plain, plain_en = _RELATION_TEXT[relation]

    index = cycle_index(month, day, branch)
    state, state_en = CYCLE_STATES[index], CYCLE_STATES_EN[index]
    probability = adjust_for_cycle(relation.value, index)
    is_void = index == VOID_INDEX
    is_yin = moving_line % 2 == 0

    if moving_line <= 3:
        yao_status = "下卦动，物在低处或内室"
        yao_status_en = "Lower line active: Item is low or deep inside"
    else:
        yao_status = "上卦动，物在高处或外围"
        yao_status_en = "Upper line active: Item is high or peripheral"
    if is_yin:
        movement = "阴爻动：被遮掩、压在下方"
        movement_en = "Yin line: Hidden or underneath"
    else:
        movement = "阳爻动：物有位移，可能在视野边缘"
        movement_en = "Yang line: Displaced or at the edge of sight"

    meihua = (
        f"【本卦：{TRIGRAM_NAMES[upper]}{TRIGRAM_NAMES[lower]}】\n"
        f"{theory} · 此物并未远去。\n"
        f"{plain}\n\n"
        f"【变卦：第{moving_line}爻动】\n"
        f"暗示：{yao_status}。{movement}。\n"
        f"建议往{direction.name}方排查{direction.feature}。"
    )
    meihua_en = (
        f"【Gua: {TRIGRAM_NAMES_EN[upper]}{TRIGRAM_NAMES_EN[lower]}】\n"
        f"{theory_en} - Not far away.\n"
        f"{plain_en}\n\n"
        f"【Change: Line {moving_line}】\n"
        f"Insight: {yao_status_en}. {movement_en}.\n"
        f"Check {direction.name_en} side near {direction.feature_en}."
    )

    if is_void:
        summary = f"【空亡】“{query.item_name}”踪迹全无，恐难寻回。"
        summary_en = f'[Void] "{query.item_name}" is elusive, difficult to retrieve.'
    else:
        summary = f"【{state}】“{query.item_name}”尚在{direction.name}方，速去寻之。"
        summary_en = f'[{state_en}] "{query.item_name}" is likely to the {direction.name_en}. Search promptly.'

    liuyao = (
        f"用神落于【{ELEMENTS_ZH[ti]}】位，动爻{moving_line}。\n"
        f"物品当前呈现“{'伏藏' if is_yin else '显露'}”之相。\n"
        f"【白话】{'东西躲起来了，可能掉进了缝隙或衣物下面。' if is_yin else '东西在显眼处，换个角度看就能发现。'}"
    )
    liuyao_en = (
        f"Focus Element: {ti}, Change {moving_line}.\n"
        f"State: {'Hidden' if is_yin else 'Visible'}.\n"
        f"Insight: {'Tucked away in a gap or under fabrics.' if is_yin else 'In plain sight, look from a different angle.'}"
    )

    _logger.debug(
        "upper=%d lower=%d moving=%d ti=%s yong=%s relation=%s cycle=%s prob=%d",
        upper, lower, moving_line, ti, yong, relation.name, state_en, probability,
    )

    return DivinationResult(
        summary=summary,
        summary_en=summary_en,
        location_analysis=f"解析：{location.desc}{location.feature}",
        location_analysis_en=f"Analysis: {location.desc_en} {location.feature_en}",
        meihua=meihua,
        meihua_en=meihua_en,
        liuyao=liuyao,
        liuyao_en=liuyao_en,
        xiaoliuren=f"测得：{state}\n物在{'虚无处' if is_void else '近处'}。",
        xiaoliuren_en=f"Result: {state_en}\nLocated {'far/lost' if is_void else 'nearby'}.",
        probability=probability,
        lang=lang if lang in SUPPORTED_LANGS else "zh",
    )
