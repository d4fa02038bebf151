"""SVG renderer for the six-state Small Liu Ren wheel.

Produces an inline SVG string for st.markdown(..., unsafe_allow_html=True).
Coordinate system: viewBox="0 0 100 100", state 0 at the top, clockwise.
"""

from __future__ import annotations

import html
import math

from omnifind.divination import CYCLE_STATES

_BG = "#000000"
_RING_COLOR = "rgba(255,255,255,0.08)"
_ACTIVE_FILL = "#ffffff"
_ACTIVE_TEXT = "#000000"
_IDLE_TEXT = "rgba(255,255,255,0.25)"
_RADIUS = 42

# Short labels sized for the wheel, not the full English state names.
_WHEEL_LABELS_EN = ("Peace", "Delay", "SwiftJoy", "Conflict", "SmallLuck", "Void")


def _label_xy(index: int) -> tuple[float, float]:
    rad = math.radians(index * 60 - 90)
    return 50 + _RADIUS * math.cos(rad), 50 + _RADIUS * math.sin(rad)


def render_cycle_wheel(active_index: int | None, lang: str = "zh", size: int = 96) -> str:
    """Return an SVG wheel of the six states with `active_index` highlighted.

    Args:
        active_index: 0..5, or None to highlight nothing.
        lang: 'zh' or 'en' label set.
        size: Rendered width/height in CSS pixels.

    Returns:
        SVG markup.
    """
    labels = _WHEEL_LABELS_EN if lang == "en" else CYCLE_STATES
    parts: list[str] = [
        f'<circle cx="50" cy="50" r="{_RADIUS + 6}" fill="none" stroke="{_RING_COLOR}" stroke-width="0.6"/>'
    ]
    for i, label in enumerate(labels):
        x, y = _label_xy(i)
        text = html.escape(label)
        if i == active_index:
            parts.append(
                f'<rect x="{x - 11:.2f}" y="{y - 4.5:.2f}" width="22" height="9" rx="4.5"'
                f' fill="{_ACTIVE_FILL}" class="active"/>'
            )
            parts.append(
                f'<text x="{x:.2f}" y="{y:.2f}" fill="{_ACTIVE_TEXT}" font-size="5" font-weight="bold"'
                f' text-anchor="middle" dominant-baseline="central">{text}</text>'
            )
        else:
            parts.append(
                f'<text x="{x:.2f}" y="{y:.2f}" fill="{_IDLE_TEXT}" font-size="5"'
                f' text-anchor="middle" dominant-baseline="central">{text}</text>'
            )
    body = "\n  ".join(parts)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"'
        f' width="{size}" height="{size}" style="display:block;margin:0 auto;background:{_BG};">\n'
        f"  {body}\n"
        "</svg>"
    )
