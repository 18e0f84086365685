"""
StudyBot — Session State Package

Closed menu/input enums, the UserSession snapshot, patches and the store.
"""
from studybot.state.session import (
    ExpectingInput, MenuTag, ParseContext, SessionPatch, UserSession,
)

__all__ = ["ExpectingInput", "MenuTag", "ParseContext", "SessionPatch", "UserSession"]
