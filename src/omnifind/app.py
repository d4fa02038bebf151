"""OmniFind — Streamlit app for the lost-item divination."""

import datetime
import logging
import random

import streamlit as st
from streamlit_js_eval import streamlit_js_eval

from omnifind.config import load_config
from omnifind.divination import compute, cycle_state_index, period_name
from omnifind.i18n import t
from omnifind.models import Direction, DivinationInput, HistoryItem
from omnifind.narrative import compose_reading
from omnifind.renderers.wheel import render_cycle_wheel
from omnifind.storage import HistoryStore, build_store

_logger = logging.getLogger(__name__)

TOSS_COUNT = 6
_TIME_PRESETS: dict[str, int] = {"time_now": 0, "time_hour": 1, "time_12h": 12}


@st.cache_resource(show_spinner=False)
def _get_store() -> HistoryStore:
    """One history store per Streamlit process."""
    return build_store(load_config())


def _init_session_state() -> None:
    defaults = {
        "phase": "idle",  # idle → liuyao → done
        "toss_step": 0,
        "coins": [True, True, True],
        "query": None,
        "result": None,
        "history": None,
        "error_msg": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _detect_lang() -> None:
    # navigator.language is None on the first run; the rerun fills it in.
    if "lang" in st.session_state:
        return
    browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if browser_lang is not None:
        st.session_state.lang = "zh" if browser_lang.lower().startswith("zh") else "en"


def _format_lost_time(moment: datetime.datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M")


def _reset_flow() -> None:
    st.session_state.phase = "idle"
    st.session_state.toss_step = 0
    st.session_state.coins = [True, True, True]


def run_divination(
    query: DivinationInput,
    lang: str,
    store: HistoryStore,
    now: datetime.datetime | None = None,
) -> tuple[HistoryItem, list[HistoryItem]]:
    """Calculate, compose, save, and reload history for one submission.

    Returns:
        The saved HistoryItem and the store's history after saving.
    """
    raw = compute(query, lang, now=now)
    result = compose_reading(raw, query, now=now)
    item = HistoryItem.create(query, result)
    store.save(item)
    return item, store.get_all()


def _render_history(lang: str, store: HistoryStore) -> None:
    if st.session_state.history is None:
        st.session_state.history = store.get_all()
    with st.sidebar:
        st.header(t("history_title", lang))
        history: list[HistoryItem] = st.session_state.history
        if not history:
            st.caption(t("no_history", lang))
            return
        for item in history:
            when = datetime.datetime.fromtimestamp(item.timestamp / 1000)
            title = f"{item.input.item_name} · {when:%Y-%m-%d %H:%M} · {item.result.probability}%"
            with st.expander(title, expanded=False):
                st.text(item.result.text("summary", lang))
                st.text(item.result.text("location_analysis", lang))


def _render_form(lang: str) -> None:
    item_name = st.text_input(t("label_item", lang), key="item_name")
    lost_location = st.text_input(t("label_location", lang), key="lost_location")

    preset_keys = [*_TIME_PRESETS, "time_custom"]
    preset = st.radio(
        t("label_time", lang),
        preset_keys,
        format_func=lambda k: t(k, lang),
        horizontal=True,
        key="time_preset",
    )
    now = datetime.datetime.now()
    if preset == "time_custom":
        col1, col2 = st.columns(2)
        with col1:
            date_val = st.date_input(t("time_custom", lang), value=now.date(), max_value=now.date())
        with col2:
            time_val = st.time_input(" ", value=now.time().replace(second=0, microsecond=0), step=300)
        lost_at = datetime.datetime.combine(date_val, time_val)
    else:
        lost_at = now - datetime.timedelta(hours=_TIME_PRESETS[preset])
    st.caption(f"{t('current_period', lang)}: {period_name(lost_at.hour, lang)}")

    direction = st.selectbox(
        t("label_direction", lang),
        list(Direction),
        index=list(Direction).index(Direction.CENTER),
        format_func=lambda d: t(f"dir_{d.value}", lang),
    )

    if st.session_state.error_msg:
        st.error(st.session_state.error_msg)

    if st.button(t("btn_start", lang), use_container_width=True, key="submit_btn"):
        if not item_name.strip():
            st.session_state.error_msg = t("error_item", lang)
            st.rerun()
        st.session_state.error_msg = None
        st.session_state.query = DivinationInput(
            item_name=item_name.strip(),
            lost_location=lost_location,
            direction=direction,
            lost_time=_format_lost_time(lost_at),
        )
        st.session_state.toss_step = 0
        st.session_state.phase = "liuyao"
        st.rerun()


def _render_toss(lang: str, store: HistoryStore) -> None:
    step: int = st.session_state.toss_step
    st.subheader(t("liuyao_title", lang))
    st.caption(f"{step}/{TOSS_COUNT}")
    faces = " ".join("⚪" if heads else "⚫" for heads in st.session_state.coins)
    st.markdown(f"<div style='font-size:3rem;text-align:center'>{faces}</div>", unsafe_allow_html=True)

    if step < TOSS_COUNT:
        label = f"{t('btn_toss', lang)} · {t('toss_current', lang).format(n=step + 1)}"
        if st.button(label, use_container_width=True, key="toss_btn"):
            # Cosmetic only; the calculation never sees the coins.
            st.session_state.coins = [random.random() > 0.5 for _ in range(3)]
            st.session_state.toss_step = step + 1
            st.rerun()
        return

    with st.spinner(t("analyzing", lang)):
        try:
            item, history = run_divination(st.session_state.query, lang, store)
        except Exception:
            _logger.exception("Calculation failed")
            st.session_state.error_msg = t("error_calc", lang)
            _reset_flow()
            st.rerun()
    st.session_state.result = item.result
    st.session_state.history = history
    st.session_state.phase = "done"
    st.rerun()


def _render_result(lang: str) -> None:
    result = st.session_state.result
    st.metric(t("probability", lang), f"{result.probability}%")

    st.subheader(t("summary_title", lang))
    st.text(result.text("summary", lang))

    st.subheader(t("location_title", lang))
    st.text(result.text("location_analysis", lang))

    st.subheader(t("meihua_title", lang))
    st.text(result.text("meihua", lang))

    st.subheader(t("liuyao_detail_title", lang))
    st.text(result.text("liuyao", lang))

    st.subheader(t("xlr_title", lang))
    st.markdown(render_cycle_wheel(cycle_state_index(result), lang), unsafe_allow_html=True)
    st.text(result.text("xiaoliuren", lang))

    if st.button(t("btn_retry", lang), use_container_width=True, key="retry_btn"):
        st.session_state.result = None
        _reset_flow()
        st.rerun()


def main() -> None:
    _detect_lang()
    lang: str = st.session_state.get("lang", "zh")

    st.set_page_config(page_title=t("page_title", lang), page_icon="☯", layout="centered")
    _init_session_state()
    store = _get_store()

    _, lang_col = st.columns([4, 1])
    with lang_col:
        if st.button(t("btn_lang", lang), key="lang_btn"):
            st.session_state.lang = "en" if lang == "zh" else "zh"
            st.rerun()

    st.title(t("page_title", lang))
    _render_history(lang, store)

    phase = st.session_state.phase
    if phase == "idle":
        _render_form(lang)
    elif phase == "liuyao":
        _render_toss(lang, store)
    else:
        _render_result(lang)

    st.caption(t("footer", lang))
