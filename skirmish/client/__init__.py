"""Thin client core: snapshot interpolation, view diffing and input mapping."""

from .input import InputGate
from .session import ClientSession
from .sync import ClientSynchronizer, Frame
from .view import ViewDiff, ViewReconciler

__all__ = [
    "ClientSession",
    "ClientSynchronizer",
    "Frame",
    "InputGate",
    "ViewDiff",
    "ViewReconciler",
]
