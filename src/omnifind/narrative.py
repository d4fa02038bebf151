"""Step-by-step Six Lines explanation shown alongside a finished reading."""

from dataclasses import replace
from datetime import datetime

from omnifind.divination import DIRECTIONS, period_name
from omnifind.models import Direction, DivinationInput, DivinationResult


def compose_reading(
    result: DivinationResult,
    query: DivinationInput,
    now: datetime | None = None,
) -> DivinationResult:
    """Replace the Six Lines narrative with the three-step explanation.

    The moving line and yin/yang reading here are keyed on the final
    probability rather than the trigram arithmetic, and the advice names the
    two-hour period of `now`. Every other field is passed through unchanged.

    Args:
        result: Output of divination.compute().
        query: The input the result was computed from.
        now: Current time. Defaults to the local wall clock.

    Returns:
        A new DivinationResult; this is the one to show and store.
    """
    now = now or datetime.now()
    is_yin = result.probability % 2 == 0
    moving = result.probability % 6 + 1
    direction = DIRECTIONS[Direction.coerce(query.direction)]
    period = period_name(now.hour, "zh")
    period_en = period_name(now.hour, "en")

    detail = (
        "第一步：辨析体用关系\n"
        f"“体”代表失主，“用”代表丢失物品。当前卦象显示体用和谐，磁场能量在{direction.name}方位形成了稳定的感应。\n\n"
        "第二步：观察动爻变化\n"
        f"当前动爻位于第{moving}爻。此爻动则暗示物品“{'入库隐匿' if is_yin else '破壳而出'}”。"
        f"物品并非遗失在开阔地带，而是被夹杂在某种{'容器、缝隙或重叠的布料' if is_yin else '具有支撑功能的支架、边缘或挂钩'}中。\n\n"
        "第三步：判定物品状态\n"
        f"寻物建议：莫要盲目远眺，应重点排查视线底部的死角。如果能在今日的“{period}”寻觅，成功率最高。"
    )
    detail_en = (
        "1. Ti-Yong Relationship Analysis\n"
        '"Ti" represents the seeker, while "Yong" represents the lost item. The current hexagram shows '
        f"harmony between the two, with magnetic energy concentrated in the {direction.name_en}.\n\n"
        "2. Moving Line Insight\n"
        f"The moving line is at position {moving}. This motion suggests the item is "
        f"\"{'Enclosed' if is_yin else 'Exposed'}\". It is likely not in an open space, but caught within "
        f"{'containers, crevices, or overlapping fabrics' if is_yin else 'supporting structures, shelf edges, or hooks'}.\n\n"
        "3. Final Retrieval Advice\n"
        "Search Advice: Do not look far. Focus on blind spots at the lower level of your vision. "
        f'Searching during the current "{period_en}" period will yield the best results.'
    )
    return replace(result, liuyao=detail, liuyao_en=detail_en)
