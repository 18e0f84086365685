"""
StudyBot — Dispatch Package

Command parser, menu transition table, answer validator and dispatcher.
"""
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.dispatcher import DispatchResult, Dispatcher, HandlerResult
from studybot.dispatch.parser import parse

__all__ = ["Command", "CommandType", "Dispatcher", "DispatchResult", "HandlerResult", "parse"]
