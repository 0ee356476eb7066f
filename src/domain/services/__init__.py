"""Domain services for the therapy session tracker."""

from .session_journal import SessionJournal

__all__ = ["SessionJournal"]
