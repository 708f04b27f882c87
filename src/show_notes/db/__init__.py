"""Persistence for completed show notes."""

from .models import Base, ShowNote
from .store import ShowNoteStore

__all__ = ["Base", "ShowNote", "ShowNoteStore"]
