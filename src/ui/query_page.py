"""NiceGUI query page bound to a streaming session controller."""

from nicegui import ui

from src.client.config import get_client_config
from src.models.schemas import ErrorCategory, SessionSnapshot, SessionState
from src.stream.session import SessionController

STATUS_LABELS = {
    SessionState.IDLE: "",
    SessionState.STREAMING: "Analyzing...",
    SessionState.COMPLETED: "Done",
    SessionState.ERRORED: "Failed",
    SessionState.CANCELLED: "Cancelled",
}


@ui.page("/")
def query_page() -> None:
    """Main query page."""
    config = get_client_config()
    controller = SessionController(config=config)
    # The controller must not outlive the browser tab
    ui.context.client.on_disconnect(controller.close)

    query_input: ui.input
    highlights_box: ui.checkbox
    order_box: ui.checkbox
    status_label: ui.label
    progress_container: ui.column
    result_container: ui.column

    def render_progress(snapshot: SessionSnapshot) -> None:
        progress_container.clear()
        with progress_container:
            for item in snapshot.progress:
                marker = "✓" if item.status == "complete" else "•"
                ui.label(f"{marker} [{item.stage}] {item.message}").classes("text-sm")

    def render_result(snapshot: SessionSnapshot) -> None:
        result_container.clear()
        with result_container:
            if snapshot.error is not None:
                color = (
                    "text-amber-600"
                    if snapshot.error.category is ErrorCategory.MEMORY_LIMIT
                    else "text-red-600"
                )
                ui.label(snapshot.error.display_text).classes(color)
            result = snapshot.result
            if result is None:
                return
            meta = result.metadata()
            if meta is not None and (scoreline := meta.scoreline()):
                ui.label(scoreline).classes("text-lg font-semibold")
            if result.summary:
                ui.markdown(result.summary)
            if moments := result.key_moments():
                with ui.column().classes("gap-0"):
                    for moment in moments:
                        ui.label(moment.label()).classes("text-sm")
            if highlight := result.primary_highlight():
                ui.link(highlight.title or "Watch highlights", highlight.url, new_tab=True)
            for source in result.sources:
                ui.link(source, source, new_tab=True).classes("text-xs")

    def on_snapshot(snapshot: SessionSnapshot) -> None:
        status_label.set_text(STATUS_LABELS[snapshot.status])
        render_progress(snapshot)
        if snapshot.status.is_terminal or snapshot.result is not None:
            render_result(snapshot)
        else:
            result_container.clear()

    async def submit() -> None:
        text = (query_input.value or "").strip()
        if not text:
            return
        request = controller.build_request(
            text,
            include_highlights=highlights_box.value,
            emphasize_order=order_box.value,
        )
        await controller.submit(request)

    controller.subscribe(on_snapshot)

    with ui.column().classes("w-full max-w-3xl mx-auto p-6 gap-4"):
        ui.label("Match Insight").classes("text-2xl font-semibold")
        with ui.row().classes("w-full items-end gap-3"):
            query_input = (
                ui.input(placeholder="Ask about a match...")
                .classes("flex-grow")
                .on("keydown.enter", submit)
            )
            ui.button("Ask", on_click=submit)
            ui.button("Stop", on_click=controller.cancel).props("flat")
        with ui.row().classes("gap-4"):
            highlights_box = ui.checkbox("Include highlights", value=config.include_highlights)
            order_box = ui.checkbox("Emphasize order", value=config.emphasize_order)
        status_label = ui.label("").classes("text-sm text-gray-500 italic")
        progress_container = ui.column().classes("w-full gap-1")
        result_container = ui.column().classes("w-full gap-2")
