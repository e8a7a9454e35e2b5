"""Callback module."""

from .bus import CallbackBus, CallbackHandler, ICallback
from .tracker import ITracker, Tracker

__all__ = ["CallbackBus", "CallbackHandler", "ICallback", "ITracker", "Tracker"]
