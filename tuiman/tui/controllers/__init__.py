"""Per-screen input state machines."""

from .base import ScreenController, Services
from .editor import EditorController
from .help import HelpController
from .history import HistoryController
from .main import MainController

__all__ = [
    "EditorController",
    "HelpController",
    "HistoryController",
    "MainController",
    "ScreenController",
    "Services",
]
