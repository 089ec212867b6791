"""YKS Pro — study tracking dashboard (study log, deneme tracker, pomodoro)."""
import logging
import sys
import time
from pathlib import Path
from typing import Optional

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pandas as pd
import streamlit as st

from db import get_supabase
from engine import MOCK_ADVICE
from yks.coach import get_performance_analysis, get_study_advice, get_weekly_plan
from yks.countdown import countdown_message, time_left
from yks.database import DatabaseClient
from yks.models import SUBJECT_COLORS, ExamType, Subject, clamp_section_score, new_study_entry, sections_for
from yks.pomodoro import Phase, PomodoroTimer, WallClockDriver
from yks.scoring import entry_net, format_net, net_score, new_deneme_entry, section_net
from yks.stats import DEFAULT_COLOR, daily_summary, deneme_trend, last_n_days, subject_chart_data, weekly_summary
from yks.store import AppState

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

PAGES = ["Dashboard", "Deneme Takibi", "Pomodoro"]

st.set_page_config(page_title="YKS Pro", layout="wide")
st.sidebar.title("YKS Pro")
default_page = st.query_params.get("page", "Dashboard")
if default_page not in PAGES:
    default_page = "Dashboard"
page = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(default_page), label_visibility="collapsed")


def handle_study_session(minutes: int):
    """Focus phase finished; only a notice, nothing is written to the study log."""
    logger.info(f"Study session completed: {minutes} minutes")
    st.session_state["pomodoro_notice"] = f"{minutes} dakikalık odak tamamlandı! Mola zamanı ☕"


# Session state: records are loaded once per browser session
if "app_state" not in st.session_state:
    st.session_state["db_error"] = None
    try:
        state = AppState(DatabaseClient(get_supabase()))
        state.refresh_entries()
        state.refresh_denemeler()
        st.session_state["app_state"] = state
    except Exception as e:
        logger.error(f"Could not connect to Supabase: {e}")
        st.session_state["app_state"] = None
        st.session_state["db_error"] = str(e)
if "pomodoro" not in st.session_state:
    timer = PomodoroTimer(on_focus_complete=handle_study_session)
    st.session_state["pomodoro"] = timer
    st.session_state["pomodoro_driver"] = WallClockDriver(timer)
    st.session_state["pomodoro_notice"] = None
if "coach_text" not in st.session_state:
    st.session_state["coach_text"] = None
if "entry_form_error" not in st.session_state:
    st.session_state["entry_form_error"] = None
if "deneme_form_error" not in st.session_state:
    st.session_state["deneme_form_error"] = None

state: Optional[AppState] = st.session_state["app_state"]


def require_state() -> AppState:
    if state is None:
        st.error(
            "Veritabanına bağlanılamadı. .env dosyasını kontrol et (SUPABASE_URL, SUPABASE_KEY). "
            f"{st.session_state['db_error']}"
        )
        st.stop()
    if state.last_error:
        col1, col2 = st.columns([6, 1])
        with col1:
            st.error(state.last_error)
        with col2:
            st.button("Kapat", key="dismiss_error", on_click=state.dismiss_error)
    return state


def render_countdown():
    left = time_left()
    st.subheader("⏳ YKS'ye Kalan Süre")
    cols = st.columns(4)
    for col, (key, label) in zip(cols, [("days", "Gün"), ("hours", "Saat"), ("minutes", "Dk"), ("seconds", "Sn")]):
        with col:
            st.metric(label, f"{left[key]:02d}")
    st.caption(countdown_message(left["days"]))


def submit_entry():
    ss = st.session_state
    try:
        entry = new_study_entry(
            ss["entry_subject"],
            ss["entry_topic"],
            ss["entry_correct"],
            ss["entry_incorrect"],
            ss["entry_duration"],
        )
    except ValueError as e:
        ss["entry_form_error"] = str(e)
        return
    ss["entry_form_error"] = None
    if ss["app_state"].add_entry(entry):
        ss["entry_topic"] = ""
        ss["entry_correct"] = None
        ss["entry_incorrect"] = None
        ss["entry_duration"] = None


def clear_deneme_inputs():
    for key in list(st.session_state.keys()):
        if key.startswith("deneme_c_") or key.startswith("deneme_i_"):
            st.session_state[key] = 0


def collect_deneme_scores(exam_type: ExamType) -> dict:
    scores = {}
    for section in sections_for(exam_type):
        score = clamp_section_score(
            section,
            st.session_state.get(f"deneme_c_{section.key}", 0),
            st.session_state.get(f"deneme_i_{section.key}", 0),
        )
        if score.correct or score.incorrect:
            scores[section.key] = score
    return scores


def submit_deneme():
    ss = st.session_state
    exam_type = ExamType(ss["deneme_exam_type"])
    try:
        deneme = new_deneme_entry(exam_type, collect_deneme_scores(exam_type))
    except ValueError as e:
        ss["deneme_form_error"] = str(e)
        return
    ss["deneme_form_error"] = None
    clear_deneme_inputs()
    ss["app_state"].add_deneme(deneme)


# ----- Dashboard -----
if page == "Dashboard":
    st.header("Dashboard")
    app = require_state()
    render_countdown()
    st.divider()

    summary = daily_summary(app.entries)
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Günlük Soru", summary["total_questions"])
    with col2:
        st.metric("Günlük Net", f"{summary['daily_net']:.2f}")
    with col3:
        st.metric("Çalışma Süresi", f"{summary['total_minutes']} dk")
    with col4:
        st.metric("Toplam Net", f"{summary['total_net']:.2f}")

    main_col, coach_col = st.columns([2, 1])
    with main_col:
        # Entry form
        st.subheader("Yeni Çalışma Ekle")
        c1, c2 = st.columns([1, 2])
        with c1:
            st.selectbox("Ders", list(Subject), index=1, format_func=lambda s: s.value, key="entry_subject")
        with c2:
            st.text_input("Konu", placeholder="Örn: Fonksiyonlar", key="entry_topic")
        c1, c2, c3 = st.columns(3)
        with c1:
            st.number_input("✓ Doğru", min_value=0, step=1, value=None, placeholder="0", key="entry_correct")
        with c2:
            st.number_input("✗ Yanlış", min_value=0, step=1, value=None, placeholder="0", key="entry_incorrect")
        with c3:
            st.number_input("Süre (dk)", min_value=0, step=1, value=None, placeholder="0", key="entry_duration")
        if st.session_state.get("entry_correct") is not None or st.session_state.get("entry_incorrect") is not None:
            preview = net_score(st.session_state.get("entry_correct") or 0, st.session_state.get("entry_incorrect") or 0)
            st.caption(f"Hesaplanan: **{preview:.2f} Net**")
        st.button("Kaydet", type="primary", on_click=submit_entry)
        if st.session_state["entry_form_error"]:
            st.warning(st.session_state["entry_form_error"])

        # Charts
        if app.entries:
            st.divider()
            ch1, ch2 = st.columns(2)
            with ch1:
                st.subheader("Ders Dağılımı")
                breakdown = pd.DataFrame(subject_chart_data(app.entries))
                st.bar_chart(breakdown, x="name", y="value", color="color")
            with ch2:
                st.subheader("Son 7 Gün")
                days = pd.DataFrame(last_n_days(app.entries))
                days["date"] = pd.to_datetime(days["date"])
                st.bar_chart(days, x="date", y="questions")
            st.subheader("Haftalık Özet")
            weeks = pd.DataFrame(weekly_summary(app.entries))
            weeks["net"] = weeks["net"].round(2)
            st.dataframe(
                weeks.rename(columns={"week": "Hafta", "entries": "Kayıt", "questions": "Soru", "net": "Net", "minutes": "Dk"}),
                hide_index=True,
                use_container_width=True,
            )

        # Activity log
        st.divider()
        st.subheader(f"Son Çalışmalar ({len(app.entries)} Kayıt)")
        if not app.entries:
            st.info("Henüz kayıt bulunmuyor. Bugün çalışmaya başla!")
        for entry in app.entries:
            row1, row2, row3 = st.columns([4, 2, 1])
            with row1:
                color = SUBJECT_COLORS.get(entry.subject, DEFAULT_COLOR)
                st.markdown(f"<span style='color:{color}'>●</span> **{entry.subject.value}** · {entry.topic}", unsafe_allow_html=True)
                st.caption(
                    f"✓ {entry.correct_count} D · ✗ {entry.incorrect_count} Y · "
                    f"**{format_net(entry_net(entry))} Net** · ⏱ {entry.duration_minutes} dk"
                )
            with row2:
                st.caption(entry.date.astimezone().strftime("%d.%m %H:%M"))
            with row3:
                st.button("🗑️", key=f"del_entry_{entry.id}", help="Kaydı Sil", on_click=app.delete_entry, args=(entry.id,))

    with coach_col:
        st.subheader("🧠 AI Koç")
        b1, b2, b3 = st.columns(3)
        with b1:
            ask_advice = st.button("Tavsiye", use_container_width=True)
        with b2:
            ask_plan = st.button("Haftalık Plan", use_container_width=True)
        with b3:
            ask_report = st.button("Rapor", use_container_width=True)
        if ask_advice or ask_plan or ask_report:
            with st.spinner("Analiz ediliyor..."):
                if ask_advice:
                    st.session_state["coach_text"] = get_study_advice(app.entries)
                elif ask_plan:
                    st.session_state["coach_text"] = get_weekly_plan(app.entries)
                else:
                    st.session_state["coach_text"] = get_performance_analysis(app.entries)
        if st.session_state["coach_text"]:
            st.markdown(st.session_state["coach_text"])
        elif app.entries:
            st.info("Son çalışmalarını analiz etmem ve sana özel çalışma stratejileri oluşturmam için yukarıdaki butonlara tıkla.")
        else:
            st.info(MOCK_ADVICE)

# ----- Deneme Takibi -----
elif page == "Deneme Takibi":
    st.header("Deneme Takibi")
    app = require_state()
    render_countdown()
    st.divider()

    exam_type = ExamType(
        st.radio(
            "Sınav",
            [t.value for t in ExamType],
            horizontal=True,
            key="deneme_exam_type",
            on_change=clear_deneme_inputs,
        )
    )
    sections = sections_for(exam_type)
    groups = []
    for section in sections:
        if section.group not in groups:
            groups.append(section.group)

    for group in groups:
        st.markdown(f"**{group}**")
        for section in [s for s in sections if s.group == group]:
            c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
            with c1:
                st.write(f"{section.label} ({section.max_questions} soru)")
            with c2:
                correct = st.number_input(
                    "D", min_value=0, max_value=section.max_questions, step=1, key=f"deneme_c_{section.key}"
                )
            with c3:
                incorrect = st.number_input(
                    "Y", min_value=0, max_value=section.max_questions, step=1, key=f"deneme_i_{section.key}"
                )
            with c4:
                st.metric("Net", f"{section_net(clamp_section_score(section, correct, incorrect)):.2f}")

    scores = collect_deneme_scores(exam_type)
    total = sum(section_net(s) for s in scores.values())
    col1, col2, col3 = st.columns([1, 1, 2])
    with col1:
        st.metric("Toplam Net", f"{total:.2f}")
    with col2:
        st.metric("Girilen Bölüm", f"{len(scores)} / {len(sections)}")
    with col3:
        st.button("Denemeyi Kaydet", type="primary", disabled=not scores, on_click=submit_deneme)
    if st.session_state["deneme_form_error"]:
        st.warning(st.session_state["deneme_form_error"])

    st.divider()
    st.subheader("Kayıtlı Denemeler")
    if not app.denemeler:
        st.info("Henüz kayıtlı deneme yok.")
    else:
        trend = pd.DataFrame(deneme_trend(app.denemeler))
        if len(trend) > 1:
            st.line_chart(trend, x="created_at", y="total_net", color="#6366f1")
        pending = st.session_state.get("confirm_delete_deneme")
        for deneme in app.denemeler:
            with st.expander(
                f"{deneme.exam_type.value} · {deneme.created_at.astimezone().strftime('%d.%m.%Y %H:%M')} · "
                f"{deneme.total_net:.2f} Net"
            ):
                labels = {s.key: s.label for s in sections_for(deneme.exam_type)}
                rows = [
                    {"Bölüm": labels.get(key, key), "D": s.correct, "Y": s.incorrect, "Net": round(section_net(s), 2)}
                    for key, s in deneme.scores.items()
                ]
                st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
                if pending == deneme.id:
                    st.warning("Bu denemeyi silmek istediğine emin misin?")
                    d1, d2 = st.columns(2)
                    with d1:
                        if st.button("Evet, sil", key=f"confirm_del_{deneme.id}"):
                            st.session_state["confirm_delete_deneme"] = None
                            app.delete_deneme(deneme.id)
                            st.rerun()
                    with d2:
                        if st.button("Vazgeç", key=f"cancel_del_{deneme.id}"):
                            st.session_state["confirm_delete_deneme"] = None
                            st.rerun()
                elif st.button("Sil", key=f"del_deneme_{deneme.id}"):
                    st.session_state["confirm_delete_deneme"] = deneme.id
                    st.rerun()

# ----- Pomodoro -----
elif page == "Pomodoro":
    st.header("Pomodoro")
    timer: PomodoroTimer = st.session_state["pomodoro"]
    driver: WallClockDriver = st.session_state["pomodoro_driver"]

    for entered in driver.sync():
        if entered == Phase.FOCUS:
            st.toast("Mola bitti, odaklanma zamanı! 📚")
    if st.session_state["pomodoro_notice"]:
        st.toast(st.session_state["pomodoro_notice"])
        st.session_state["pomodoro_notice"] = None

    with st.expander("⚙️ Ayarlar"):
        s1, s2 = st.columns(2)
        with s1:
            focus_minutes = st.number_input("Odak (dk)", min_value=1, max_value=180, value=timer.focus_minutes, step=1)
        with s2:
            break_minutes = st.number_input("Mola (dk)", min_value=1, max_value=60, value=timer.break_minutes, step=1)
        if st.button("Uygula"):
            timer.update_settings(int(focus_minutes), int(break_minutes))
            st.rerun()

    label = "📚 Odaklanma" if timer.phase == Phase.FOCUS else "☕ Mola"
    st.subheader(label)
    st.markdown(f"<h1 style='text-align:center;font-size:5rem'>{timer.display}</h1>", unsafe_allow_html=True)
    st.progress(min(1.0, timer.progress / 100))
    st.caption(timer.message())

    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("⏸ Duraklat" if timer.running else "▶ Başlat", type="primary", use_container_width=True):
            timer.toggle()
            st.rerun()
    with c2:
        if st.button("↺ Sıfırla", use_container_width=True):
            timer.reset()
            st.rerun()
    with c3:
        st.metric("Tamamlanan Oturum", timer.sessions)

    # Drive the countdown: one rerun per second while running
    if timer.running:
        time.sleep(1)
        st.rerun()
