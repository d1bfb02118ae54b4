"""History screen: past runs, their details and replay."""

from tuiman.tui import keys
from tuiman.tui.controllers.base import ScreenController
from tuiman.tui.layout import RATIO_STEP, nudge_split_ratio
from tuiman.tui.state import MAIN_DEFAULT_STATUS
from tuiman.utils.errors import TuimanError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

HISTORY_HINT = (
    "HISTORY | j/k move | r replay | H/L resize | { } details | drag divider | Esc back"
)


class HistoryController(ScreenController):
    def handle_key(self, key: str) -> None:
        state = self.state
        match key:
            case "j":
                if state.history_selected + 1 < len(state.runs):
                    state.history_selected += 1
                    state.scroll.history_detail = 0
            case "k":
                if state.history_selected > 0:
                    state.history_selected -= 1
                    state.scroll.history_detail = 0
            case "{":
                state.scroll.history_detail = max(0, state.scroll.history_detail - 1)
            case "}":
                state.scroll.history_detail += 1
            case "H" | "L":
                delta = -RATIO_STEP if key == "H" else RATIO_STEP
                state.ratios.split = nudge_split_ratio(state.ratios.split, delta)
            case "r":
                self.replay()
            case keys.ESCAPE:
                self.return_to_main()
                state.set_status(MAIN_DEFAULT_STATUS)

    def replay(self) -> None:
        """Send the current stored version of the selected run's request."""
        run = self.state.selected_run()
        if run is None:
            return

        try:
            request = self.services.store.load(run.request_id)
        except TuimanError as e:
            logger.info(f"Replay of run {run.id} failed: {e.message}")
            self.state.set_error("Could not load request for replay")
            return

        self.send_and_record(request)
        self.return_to_main()
        self.reload_requests(request.id)
