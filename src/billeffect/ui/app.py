"""NiceGUI powered map and timeline for Bill Effect."""
from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

from nicegui import events as nicegui_events
from nicegui import ui

from ..config import AppConfig, resolve_config_path
from ..core.errors import BillEffectError
from ..core.types import SimulationEvent
from ..playback import SPEEDS, PlaybackEngine, PlaybackState
from ..runtime import create_resources
from ..session import SimulationSession
from ..store import AppStore, StateEvents

_IMPACT_COLORS: Dict[str, str] = {
    "positive": "#22c55e",
    "negative": "#ef4444",
    "neutral": "#94a3b8",
    "mixed": "#8b5cf6",
}
_IMPACT_ICONS: Dict[str, str] = {"positive": "↑", "negative": "↓", "neutral": "→"}
_US_CENTER = (39.8, -98.6)
_SLIDER_STEPS = 1000


def _format_date(value: date) -> str:
    return value.strftime("%b %d, %Y")


def _event_to_row(event: SimulationEvent) -> Dict[str, str]:
    return {
        "id": event.id,
        "date": event.date.isoformat(),
        "state": event.state,
        "impact": f"{_IMPACT_ICONS[event.impact]} {event.impact}",
        "title": event.title,
        "description": event.description,
    }


def _marker_tooltip(group: StateEvents) -> str:
    count = len(group.events)
    lines = [f"<b>{group.state}</b> ({count} event{'s' if count != 1 else ''})"]
    lines.extend(f"{_IMPACT_ICONS[event.impact]} {event.title}" for event in group.events[-5:])
    return "<br>".join(lines)


def run_ui(
    config: AppConfig,
    *,
    host: str = "127.0.0.1",
    port: int = 8080,
    config_path: Path | None = None,
) -> None:
    """Start the NiceGUI based map and timeline."""

    config_file_path = resolve_config_path(config_path)
    resources = create_resources(config)
    store = AppStore(
        PlaybackEngine(
            horizon_years=config.playback.horizon_years,
            base_interval=config.playback.base_interval,
        )
    )
    session = SimulationSession(
        store=store,
        analyst=resources.analyst,
        pdf_extractor=resources.pdf_extractor,
        remote=resources.remote,
    )
    playback = store.playback

    ui.colors(
        primary="#2563eb",
        secondary="#111827",
        accent="#f97316",
        positive="#22c55e",
        negative="#ef4444",
        info="#0ea5e9",
        warning="#facc15",
    )

    with ui.header().classes("items-center justify-between bg-primary text-white px-6 py-3 shadow-lg"):
        with ui.row().classes("items-center gap-3"):
            ui.icon("gavel").classes("text-2xl")
            ui.label("Bill Effect").classes("text-lg font-semibold")
        mode_text = config.analysis.provider.title() if resources.remote else "Offline analyst"
        ui.badge(mode_text, color="accent").classes("text-sm")

    with ui.row().classes("w-full max-w-7xl mx-auto mt-4 gap-6 flex-col lg:flex-row"):
        with ui.column().classes("w-full lg:w-1/3 gap-4"):
            with ui.card().classes("w-full shadow-md"):
                ui.label("Bill").classes("text-base font-semibold mb-2")
                bill_input = ui.textarea("Paste bill text here...").props("outlined autogrow").classes("w-full")
                with ui.row().classes("gap-2"):
                    use_text_button = ui.button("Use text", icon="description")
                upload = ui.upload(
                    label="Upload a bill (PDF/TXT/MD)",
                    auto_upload=True,
                    max_files=1,
                    on_upload=lambda event: handle_upload(event),
                ).props("accept=.pdf,.txt,.md,.markdown flat bordered").classes("w-full")
                if not session.pdf_enabled:
                    upload.tooltip("PDF extraction requires a Reducto API key")
                bill_title_label = ui.label("No bill loaded").classes("text-sm text-gray-600 mt-2")
                with ui.row().classes("gap-2 mt-3"):
                    start_button = ui.button("Start simulation", color="primary", icon="play_circle")
                    reset_button = ui.button("Reset", color="negative", icon="restart_alt")
                analyzing_spinner = ui.spinner(size="lg")
                analyzing_spinner.visible = False
                error_alert = ui.label("").classes("text-sm text-negative")
                error_alert.visible = False
            with ui.card().classes("w-full shadow-md"):
                ui.label("Analysis").classes("text-base font-semibold mb-2")
                analysis_markdown = ui.markdown("Run a simulation to see the key points.").classes("text-sm")
            with ui.card().classes("w-full shadow-md"):
                ui.label("Activity").classes("text-base font-semibold mb-2")
                log_columns = [
                    {"name": "time", "label": "Time", "field": "time", "align": "left"},
                    {"name": "stage", "label": "Stage", "field": "stage", "align": "left"},
                    {"name": "message", "label": "Details", "field": "message", "align": "left"},
                ]
                log_table = ui.table(columns=log_columns, rows=[], row_key="id").classes("w-full")
                log_table.props("dense wrap-cells flat")
        with ui.column().classes("w-full lg:w-2/3 gap-4"):
            with ui.card().classes("w-full shadow-md"):
                event_map = ui.leaflet(center=_US_CENTER, zoom=4).classes("w-full h-[28rem]")
            with ui.card().classes("w-full shadow-md"):
                with ui.row().classes("w-full items-center gap-4"):
                    play_button = ui.button(icon="play_arrow").props("round")
                    timeline_slider = ui.slider(
                        min=0,
                        max=_SLIDER_STEPS,
                        value=0,
                        on_change=lambda event: handle_slider(event),
                    ).classes("grow")
                    date_label = ui.label("").classes("text-sm font-mono w-32")
                    speed_toggle = ui.toggle(
                        {speed: f"{speed}x" for speed in SPEEDS},
                        value=1,
                        on_change=lambda event: handle_speed(event),
                    )
                counter_label = ui.label("").classes("text-xs text-gray-500")
            with ui.card().classes("w-full shadow-md"):
                ui.label("Visible events").classes("text-base font-semibold mb-2")
                event_columns = [
                    {"name": "date", "label": "Date", "field": "date", "align": "left", "sortable": True},
                    {"name": "state", "label": "State", "field": "state", "align": "left", "sortable": True},
                    {"name": "impact", "label": "Impact", "field": "impact", "align": "left"},
                    {"name": "title", "label": "Title", "field": "title", "align": "left"},
                    {"name": "description", "label": "Details", "field": "description", "align": "left"},
                ]
                event_table = ui.table(columns=event_columns, rows=[], row_key="id").classes("w-full")
                event_table.props("dense wrap-cells flat")

    markers: List[object] = []
    updating_slider = False

    def _notify_error(exc: Exception) -> None:
        ui.notify(str(exc), color="negative")

    def handle_use_text() -> None:
        try:
            bill = session.load_text(bill_input.value or "")
        except BillEffectError as exc:
            _notify_error(exc)
            return
        ui.notify(f"Loaded {bill.title}", color="positive")

    async def handle_upload(event: nicegui_events.UploadEventArguments) -> None:
        data = event.content.read()
        try:
            bill = await session.load_file(event.name, data)
        except BillEffectError as exc:
            _notify_error(exc)
            return
        finally:
            upload.reset()
        bill_input.set_value(bill.content)
        ui.notify(f"Loaded {bill.title}", color="positive")

    async def handle_start() -> None:
        if session.is_analyzing:
            ui.notify("A simulation is already running.", color="warning")
            return
        if await session.start_simulation():
            ui.notify(f"Generated {len(store.events)} events", color="positive")
        elif session.last_error:
            ui.notify(session.last_error, color="negative")

    def handle_reset() -> None:
        session.reset()
        bill_input.set_value("")

    def handle_slider(event: nicegui_events.ValueChangeEventArguments) -> None:
        if updating_slider or event.value is None:
            return
        state = playback.state
        total_days = (state.end_date - state.start_date).days
        playback.seek(state.start_date + timedelta(days=round(total_days * event.value / _SLIDER_STEPS)))

    def handle_speed(event: nicegui_events.ValueChangeEventArguments) -> None:
        if event.value in SPEEDS:
            playback.set_speed(int(event.value))

    use_text_button.on("click", handle_use_text)
    start_button.on("click", handle_start)
    reset_button.on("click", handle_reset)
    play_button.on("click", playback.toggle)

    def render_markers(groups: List[StateEvents]) -> None:
        for layer in markers:
            event_map.remove_layer(layer)
        markers.clear()
        for group in groups:
            if group.jurisdiction is None:
                continue
            radius = 8 + min(len(group.events), 10)
            layer = event_map.generic_layer(
                name="circleMarker",
                args=[
                    list(group.jurisdiction.centroid),
                    {
                        "radius": radius,
                        "color": "white",
                        "weight": 2,
                        "fillColor": _IMPACT_COLORS[group.impact],
                        "fillOpacity": 0.9,
                    },
                ],
            )
            layer.run_method("bindTooltip", _marker_tooltip(group))
            markers.append(layer)

    def render_playback(state: PlaybackState) -> None:
        nonlocal updating_slider
        updating_slider = True
        try:
            timeline_slider.set_value(round(state.progress * _SLIDER_STEPS))
        finally:
            updating_slider = False
        date_label.set_text(_format_date(state.current_date))
        play_button.props(f"icon={'pause' if state.is_playing else 'play_arrow'}")
        speed_toggle.set_value(state.speed)

    def render_analysis(snapshot: Dict[str, object]) -> None:
        analysis = snapshot.get("analysis")
        if analysis is None:
            analysis_markdown.set_content("Run a simulation to see the key points.")
            return
        lines = [f"**{analysis.title}** ({analysis.overall_impact})", "", analysis.summary, ""]
        lines.extend(
            f"- **{clause.title}** [{clause.category}]: {', '.join(clause.affected_states)}"
            for clause in analysis.clauses
        )
        analysis_markdown.set_content("\n".join(lines))

    last_revision = -1
    last_visible: Optional[tuple] = None

    def update_components() -> None:
        nonlocal last_revision, last_visible
        if store.revision == last_revision:
            return
        last_revision = store.revision
        snapshot = session.snapshot()
        bill = snapshot["bill"]
        bill_title_label.set_text(f"Bill: {bill.title}" if bill else "No bill loaded")
        analyzing = bool(snapshot["is_analyzing"])
        analyzing_spinner.visible = analyzing
        if analyzing or bill is None:
            start_button.disable()
        else:
            start_button.enable()
        # ingestion and reset stay locked while a simulation runs
        for control in (use_text_button, upload, reset_button):
            if analyzing:
                control.disable()
            else:
                control.enable()
        error_message = snapshot.get("error")
        error_alert.set_text(error_message or "")
        error_alert.visible = bool(error_message)
        render_playback(snapshot["playback"])
        render_analysis(snapshot)
        visible = snapshot["visible_events"]
        counter_label.set_text(f"{len(visible)} of {snapshot['event_total']} events visible")
        visible_key = (snapshot["event_total"], len(visible), visible[-1].id if visible else None)
        if visible_key != last_visible:
            render_markers(snapshot["states"])
            event_table.rows = [_event_to_row(event) for event in reversed(visible)]
            last_visible = visible_key
        log_table.rows = list(reversed(snapshot["log"]))

    def shutdown() -> None:
        playback.pause()
        resources.close()

    ui.timer(0.1, update_components)
    ui.label(f"Configuration: {config_file_path}").classes("text-xs text-gray-400 mx-auto mt-4")
    ui.on_shutdown(shutdown)
    ui.run(reload=False, host=host, port=port, title="Bill Effect")
