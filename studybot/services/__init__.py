"""
StudyBot — Services

Everything a handler may call besides the session snapshot. Built once at
startup and handed to the dispatcher; tests swap in fakes (LLM, ManyChat).
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import sessionmaker

from studybot.services.friends import FriendsDirectory
from studybot.services.hooks import HookLibrary
from studybot.services.questions import QuestionBank
from studybot.services.users import UserDirectory
from studybot.tutor.llm import LLMProvider, get_llm


@dataclass
class Services:
    questions: QuestionBank
    users: UserDirectory
    friends: FriendsDirectory
    hooks: HookLibrary
    llm: LLMProvider

    @classmethod
    def build(cls, session_factory: sessionmaker, llm: Optional[LLMProvider] = None) -> "Services":
        return cls(
            questions=QuestionBank(session_factory),
            users=UserDirectory(session_factory),
            friends=FriendsDirectory(session_factory),
            hooks=HookLibrary(session_factory),
            llm=llm or get_llm(),
        )
