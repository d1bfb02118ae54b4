"""Help screen."""

from tuiman.tui import keys
from tuiman.tui.controllers.base import ScreenController
from tuiman.tui.state import MAIN_DEFAULT_STATUS

HELP_LINES = (
    "Main: j/k gg G / ? : Enter E d Esc n N H/L K/J resize ZZ/ZQ quit"
    " { } req body [ ] resp body",
    "Actions: y send, e edit body, a edit auth",
    "Commands: :new [METHOD] [URL], :edit, :history, :export [DIR], :import [DIR], :help, :q",
    "Request editor: j/k move, i edit (except Method), h/l method, { } body scroll, e body, :w/:q",
    "History: j/k move, r replay, H/L resize, { } details scroll",
    "Mouse: drag main/editor/history vertical divider and main horizontal divider",
)

HELP_FOOTER = "Press Esc to return"


class HelpController(ScreenController):
    def handle_key(self, key: str) -> None:
        if key == keys.ESCAPE:
            self.return_to_main()
            self.state.set_status(MAIN_DEFAULT_STATUS)
