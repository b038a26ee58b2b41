import hashlib
from pathlib import Path
import sys
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

# Ensure imports work whether the app is executed as a module or as a script
# where the repository directory might not already be on ``sys.path``.
CURRENT_DIR = Path(__file__).resolve().parent
if str(CURRENT_DIR) not in sys.path:
    sys.path.insert(0, str(CURRENT_DIR))

import csv_codec
from annotations import AnnotationRequest, hour_minute_format, notes_frame
from chart_data import CURVES, color_scale_entries, curve_frame, ranges_frame, unit_suffix
from probe_ranges import probe_not_inserted_ranges, probe_removed_events
from render_sampler import display_rows, timeline_position
from session_document import SessionDocument
from settings import (
    KEY_ENABLED_CURVES,
    KEY_GRAPHS_NOTES,
    KEY_GRAPHS_PROBE_NOT_INSERTED,
    KEY_PERFORMANCE_MODE,
    KEY_TEMPERATURE_UNIT,
    EnabledCurves,
    ViewerSettings,
)
from temperature import TemperatureUnit


st.set_page_config(page_title="Cook Timeline", layout="wide", page_icon="🌡️")

st.sidebar.header("🍖 Cook Upload & Settings")
uploaded = st.sidebar.file_uploader("Upload a cook CSV export", type=["csv"], key="cook_uploader")


def _state_key(prefix: str, identifier: str) -> str:
    digest = hashlib.sha1(identifier.encode('utf-8')).hexdigest()[:10]
    return f"{prefix}_{digest}"


@st.cache_data(show_spinner=False, max_entries=8)
def _parse_cached(file_name: str, file_bytes: bytes) -> SessionDocument:
    text = file_bytes.replace(b"\x00", b"").decode("utf-8-sig", errors="replace")
    return csv_codec.parse(text)


def _settings_panel() -> ViewerSettings:
    defaults = ViewerSettings().to_mapping()
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)

    st.sidebar.markdown("### Graph")
    st.session_state[KEY_TEMPERATURE_UNIT] = st.sidebar.radio(
        "Temperature unit",
        [unit.value for unit in TemperatureUnit],
        index=[unit.value for unit in TemperatureUnit].index(st.session_state[KEY_TEMPERATURE_UNIT]),
        format_func=str.capitalize,
    )
    st.session_state[KEY_GRAPHS_NOTES] = st.sidebar.checkbox(
        "Show notes", value=bool(st.session_state[KEY_GRAPHS_NOTES])
    )
    st.session_state[KEY_GRAPHS_PROBE_NOT_INSERTED] = st.sidebar.checkbox(
        "Highlight probe removed", value=bool(st.session_state[KEY_GRAPHS_PROBE_NOT_INSERTED])
    )
    st.session_state[KEY_PERFORMANCE_MODE] = st.sidebar.checkbox(
        "Performance mode", value=bool(st.session_state[KEY_PERFORMANCE_MODE])
    )

    st.sidebar.markdown("### Curves")
    curves = EnabledCurves.from_json(st.session_state[KEY_ENABLED_CURVES])
    for name in vars(curves):
        setattr(curves, name, st.sidebar.checkbox(CURVES[name].label, value=getattr(curves, name), key=f"curve_{name}"))
    st.session_state[KEY_ENABLED_CURVES] = curves.to_json()

    return ViewerSettings.from_mapping(st.session_state)


def _build_chart(document: SessionDocument, settings: ViewerSettings) -> Optional[alt.LayerChart]:
    rows = display_rows(document.rows, settings.performance_mode)
    df_chart = curve_frame(rows, settings.temperature_unit, settings.enabled_curves)
    if df_chart.empty:
        return None

    domain, colors = color_scale_entries(
        settings.enabled_curves, include_ranges=settings.show_probe_not_inserted
    )
    color_scale = alt.Scale(domain=domain, range=colors)
    suffix = unit_suffix(settings.temperature_unit)

    line = alt.Chart(df_chart).mark_line().encode(
        x=alt.X('Timestamp:Q', title='Time (s)'),
        y=alt.Y('Temperature:Q', title=f"Temperature ({suffix})"),
        color=alt.Color(
            'Series:N',
            scale=color_scale,
            legend=alt.Legend(title='Series', orient='bottom', direction='horizontal', columns=4),
        ),
        tooltip=['Timestamp:Q', 'Series:N', alt.Tooltip('Temperature:Q', format='.1f')],
    )
    layers = [line]

    if settings.show_probe_not_inserted:
        # Ranges come from the full row list, not the decimated one.
        bands = ranges_frame(probe_not_inserted_ranges(document.rows))
        if not bands.empty:
            layers.insert(
                0,
                alt.Chart(bands)
                .mark_rect(opacity=0.2)
                .encode(x='Start:Q', x2='End:Q', color=alt.Color('Series:N', scale=color_scale)),
            )

    if settings.show_notes:
        notes = notes_frame(document.rows)
        if not notes.empty:
            layers.append(
                alt.Chart(notes)
                .mark_rule(strokeDash=[4, 4], color='#e6a100')
                .encode(x='Timestamp:Q', tooltip=['Time:N', 'Note:N'])
            )

    return alt.layer(*layers).properties(height=420).interactive(bind_y=False)


if uploaded is None:
    st.sidebar.info("Upload a cook CSV export to begin.")
    st.stop()

file_bytes = uploaded.getvalue()
doc_key = _state_key("document", uploaded.name + hashlib.sha1(file_bytes).hexdigest())
if doc_key not in st.session_state:
    try:
        st.session_state[doc_key] = _parse_cached(uploaded.name, file_bytes)
    except csv_codec.MalformedDocument as exc:
        st.sidebar.error(f"Failed to load {uploaded.name}: {exc}")
        st.stop()

document: SessionDocument = st.session_state[doc_key]
settings = _settings_panel()

st.title(uploaded.name)
st.caption(f"{len(document):,} rows · {len(document.column_headers)} columns")
with st.expander("Cook details"):
    st.text(document.preamble_text)

chart = _build_chart(document, settings)
if chart is None:
    st.info("Enable at least one curve to draw the graph.")
else:
    st.altair_chart(chart, use_container_width=True)

inspect_col, notes_col = st.columns([1, 1])

with inspect_col:
    st.subheader("Inspect")
    last_timestamp = float(document.rows[-1].timestamp) if document.rows else 0.0
    inspect_at = st.number_input("Time (s)", min_value=0.0, max_value=max(last_timestamp, 0.0), step=5.0)
    position = timeline_position(document.rows, inspect_at)
    if position is None:
        st.caption("No reading at this time.")
    else:
        row = position.row
        unit = settings.temperature_unit
        suffix = unit_suffix(unit)
        st.markdown(
            f"**{hour_minute_format(row.timestamp)}** · sequence {row.sequence_number} · "
            f"{row.prediction_state.value}"
        )
        st.table(
            pd.DataFrame(
                {
                    "Core": [f"{row.virtual_core.value_for(unit):.1f}{suffix}"],
                    "Surface": [f"{row.virtual_surface.value_for(unit):.1f}{suffix}"],
                    "Ambient": [f"{row.virtual_ambient.value_for(unit):.1f}{suffix}"],
                }
            )
        )
        request = AnnotationRequest.for_row(row)
        with st.form(key=f"note_form_{row.sequence_number}"):
            text = st.text_input("Note", value=request.note)
            if st.form_submit_button("Save note"):
                if text.strip():
                    document.add_or_update_note(request.sequence_number, text)
                else:
                    document.remove_note(request.sequence_number)
                st.rerun()

with notes_col:
    st.subheader("Cook notes")
    notes = notes_frame(document.rows)
    if notes.empty:
        st.caption("No cooking notes added. Pick a time on the left to enter a new note.")
    for note in notes.itertuples(index=False):
        text_col, button_col = st.columns([5, 1])
        text_col.markdown(f"**Time: {note.Time}**  \n{note.Note}")
        if button_col.button("Remove", key=f"remove_{note.SequenceNumber}"):
            document.remove_note(int(note.SequenceNumber))
            st.rerun()

st.subheader("Probe removed")
events = probe_removed_events(document.rows)
if events.empty:
    st.caption("The probe stayed inserted for the whole cook.")
else:
    st.dataframe(events, use_container_width=True)

st.sidebar.download_button(
    "Download CSV",
    data=csv_codec.serialize(document).encode("utf-8"),
    file_name=uploaded.name,
    mime="text/csv",
)
