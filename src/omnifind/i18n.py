"""Simple two-language (zh/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "zh": "都能找",
        "en": "OmniFind",
    },
    "label_item": {
        "zh": "丢失物品",
        "en": "Item Name",
    },
    "label_location": {
        "zh": "丢失地点",
        "en": "Location",
    },
    "label_direction": {
        "zh": "方位 (选填)",
        "en": "Direction (Optional)",
    },
    "label_time": {
        "zh": "遗失时间",
        "en": "Time of Loss",
    },
    "time_now": {
        "zh": "刚刚",
        "en": "Just now",
    },
    "time_hour": {
        "zh": "1小时前",
        "en": "1h ago",
    },
    "time_12h": {
        "zh": "12小时前",
        "en": "12h ago",
    },
    "time_custom": {
        "zh": "自定义时间",
        "en": "Custom Time",
    },
    "current_period": {
        "zh": "当前时辰",
        "en": "Current time period",
    },
    "btn_start": {
        "zh": "开始寻找",
        "en": "FIND NOW",
    },
    "btn_toss": {
        "zh": "点击掷爻",
        "en": "TOSS COINS",
    },
    "btn_retry": {
        "zh": "再寻天机",
        "en": "SEARCH AGAIN",
    },
    "btn_lang": {
        "zh": "English",
        "en": "中文",
    },
    "liuyao_title": {
        "zh": "六爻掷金钱",
        "en": "Six Lines Toss",
    },
    "toss_current": {
        "zh": "第 {n} 次掷金钱",
        "en": "Toss No.{n}",
    },
    "analyzing": {
        "zh": "正在同步云端天机...",
        "en": "Syncing with Cosmic Cloud...",
    },
    "summary_title": {
        "zh": "卦辞总纲",
        "en": "DIVINATION SUMMARY",
    },
    "location_title": {
        "zh": "地点辨析",
        "en": "LOCATION ANALYSIS",
    },
    "meihua_title": {
        "zh": "梅花易数 · 卦象精解",
        "en": "I Ching · Plum Blossom Wisdom",
    },
    "liuyao_detail_title": {
        "zh": "六爻寻真 · 动静契机",
        "en": "Six Lines · Change and Insight",
    },
    "xlr_title": {
        "zh": "小六壬卦位",
        "en": "Small Liu Ren Position",
    },
    "probability": {
        "zh": "找回概率",
        "en": "Retrieval Chance",
    },
    "history_title": {
        "zh": "寻物档案",
        "en": "Records",
    },
    "no_history": {
        "zh": "尚无寻物记录",
        "en": "No history found",
    },
    "footer": {
        "zh": "万物皆有迹 · 乾坤入袖中",
        "en": "Every object leaves a cosmic trace",
    },
    "error_item": {
        "zh": "丢失物品名称？请以此心共鸣",
        "en": "What was lost? Focus your mind.",
    },
    "error_calc": {
        "zh": "服务器连接超时，请重试",
        "en": "Cloud sync failed, please retry",
    },
    "dir_NORTH": {"zh": "正北", "en": "North"},
    "dir_SOUTH": {"zh": "正南", "en": "South"},
    "dir_EAST": {"zh": "正东", "en": "East"},
    "dir_WEST": {"zh": "正西", "en": "West"},
    "dir_NORTHEAST": {"zh": "东北", "en": "Northeast"},
    "dir_NORTHWEST": {"zh": "西北", "en": "Northwest"},
    "dir_SOUTHEAST": {"zh": "东南", "en": "Southeast"},
    "dir_SOUTHWEST": {"zh": "西南", "en": "Southwest"},
    "dir_CENTER": {"zh": "中央", "en": "Center"},
}


def t(key: str, lang: str) -> str:
    """Look up UI string `key` for lang ('zh' or 'en').

    Unknown languages read the English text; unknown keys are returned unchanged.
    """
    texts = _STRINGS.get(key, {})
    return texts.get(lang) or texts.get("en") or key
