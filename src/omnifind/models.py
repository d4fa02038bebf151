"""Data model definitions — explicit boundaries between input, calculation, and storage layers."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Direction(str, Enum):
    """Compass direction the user associates with the loss."""

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    NORTHEAST = "NORTHEAST"
    NORTHWEST = "NORTHWEST"
    SOUTHEAST = "SOUTHEAST"
    SOUTHWEST = "SOUTHWEST"
    CENTER = "CENTER"

    @classmethod
    def coerce(cls, value: "str | Direction | None") -> "Direction":
        """Map any value to a Direction. Unknown values become CENTER."""
        try:
            return cls(value)
        except ValueError:
            return cls.CENTER


@dataclass(frozen=True)
class DivinationInput:
    """Raw user input. The item name is checked by the UI, nothing else is."""

    item_name: str  # "钥匙", "keys"
    lost_location: str  # Free text ("地铁2号线", "Hotel lobby")
    direction: Direction = Direction.CENTER
    lost_time: str = ""  # ISO local datetime, "YYYY-MM-DDTHH:MM"

    def to_dict(self) -> dict[str, str]:
        return {
            "itemName": self.item_name,
            "lostLocation": self.lost_location,
            "direction": self.direction.value,
            "lostTime": self.lost_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DivinationInput":
        return cls(
            item_name=data["itemName"],
            lost_location=data.get("lostLocation", ""),
            direction=Direction.coerce(data.get("direction")),
            lost_time=data.get("lostTime", ""),
        )


@dataclass(frozen=True)
class DivinationResult:
    """A full bilingual reading. Both languages are always filled."""

    summary: str
    summary_en: str
    location_analysis: str
    location_analysis_en: str
    meihua: str  # Plum Blossom narrative
    meihua_en: str
    liuyao: str  # Six Lines narrative
    liuyao_en: str
    xiaoliuren: str  # Small Liu Ren state
    xiaoliuren_en: str
    probability: int  # Retrieval chance, 12..98
    lang: str = "zh"  # Language the reading was requested in

    def text(self, name: str, lang: str) -> str:
        """Return field `name` in `lang` ('zh' or 'en')."""
        if lang == "en":
            return getattr(self, f"{name}_en")
        return getattr(self, name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meihua": self.meihua,
            "meihuaEn": self.meihua_en,
            "xiaoliuren": self.xiaoliuren,
            "xiaoliurenEn": self.xiaoliuren_en,
            "liuyao": self.liuyao,
            "liuyaoEn": self.liuyao_en,
            "summary": self.summary,
            "summaryEn": self.summary_en,
            "locationAnalysis": self.location_analysis,
            "locationAnalysisEn": self.location_analysis_en,
            "probability": self.probability,
            "lang": self.lang,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DivinationResult":
        return cls(
            summary=data["summary"],
            summary_en=data["summaryEn"],
            location_analysis=data["locationAnalysis"],
            location_analysis_en=data["locationAnalysisEn"],
            meihua=data["meihua"],
            meihua_en=data["meihuaEn"],
            liuyao=data["liuyao"],
            liuyao_en=data["liuyaoEn"],
            xiaoliuren=data["xiaoliuren"],
            xiaoliuren_en=data["xiaoliurenEn"],
            probability=int(data["probability"]),
            lang=data.get("lang", "zh"),
        )


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryItem:
    """One completed reading, as stored. Never mutated after creation."""

    id: str  # Epoch millis as a string
    timestamp: int  # Epoch millis
    input: DivinationInput
    result: DivinationResult = field(repr=False)

    @classmethod
    def create(
        cls,
        query: DivinationInput,
        result: DivinationResult,
        timestamp: int | None = None,
    ) -> "HistoryItem":
        """Stamp a new history entry with a time-based id."""
        ts = _now_millis() if timestamp is None else timestamp
        return cls(id=str(ts), timestamp=ts, input=query, result=result)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "input": self.input.to_dict(),
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryItem":
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            input=DivinationInput.from_dict(data["input"]),
            result=DivinationResult.from_dict(data["result"]),
        )
