"""Domain models"""

from .request import METHODS, AuthDescriptor, AuthLocation, AuthType, Request, guess_name
from .run import Run

__all__ = [
    "METHODS",
    "AuthDescriptor",
    "AuthLocation",
    "AuthType",
    "Request",
    "Run",
    "guess_name",
]
