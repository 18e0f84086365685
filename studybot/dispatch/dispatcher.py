"""
StudyBot — Dispatcher

One inbound message = one read, one parse, one handler chain, one write.

Handlers are registered by CommandType. Each receives:
    - session: UserSession (read-only snapshot)
    - command: Command
    - services: Services container (question bank, friends, hooks, LLM)

Each handler returns either:
    - str: reply text, no state change
    - HandlerResult: reply text + next_state + field updates + optional follow-up

A follow-up command is dispatched in the same request against the patched
snapshot; every patch in the chain is merged and written once.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from fastapi.concurrency import run_in_threadpool

from studybot.config import MAX_CHAIN_DEPTH
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.parser import parse
from studybot.messages import MESSAGES
from studybot.state.session import MenuTag, ParseContext, SessionPatch, UserSession
from studybot.state.store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class HandlerResult:
    """
    message: reply text (may be empty when a follow-up supplies it)
    next_state: menu to move to; clears expecting_input unless updates set it
    updates: other session fields to write
    follow_up: command to run next in the same request
    """
    message: str = ""
    next_state: Optional[MenuTag] = None
    updates: Dict[str, Any] = field(default_factory=dict)
    follow_up: Optional[Command] = None


@dataclass
class DispatchResult:
    reply: str
    patch: SessionPatch
    command: Optional[Command] = None
    menu: Optional[MenuTag] = None
    failed: bool = False


Handler = Callable[[UserSession, Command, Any], Awaitable[Union[str, HandlerResult]]]

# Commands an unregistered user may run
OPEN_COMMANDS = frozenset({
    CommandType.REGISTRATION,
    CommandType.HELP,
    CommandType.MANUAL_HOOK,
    CommandType.HOOK_STATS,
})


def to_patch(result: HandlerResult) -> SessionPatch:
    values = dict(result.updates)
    if result.next_state is not None:
        values["current_menu"] = result.next_state
        values.setdefault("expecting_input", None)
    return SessionPatch(**values)


class Dispatcher:

    def __init__(
        self,
        store: SessionStore,
        services: Any,
        handlers: Dict[CommandType, Handler],
        fallback: Handler,
    ):
        self._store = store
        self._services = services
        self._handlers = handlers
        self._fallback = fallback

    # ─── Core ────────────────────────────────────────────────────────────────

    def _gate(self, command: Command, session: UserSession) -> Command:
        """Unregistered users only see registration, help and hook tools."""
        if session.is_registered or command.type in OPEN_COMMANDS:
            return command
        return Command(CommandType.REGISTRATION, "prompt", original_input=command.original_input)

    async def dispatch(self, command: Command, session: UserSession) -> DispatchResult:
        """
        Run the handler chain for one command. Does not touch the store.

        Returns the joined reply and the single merged patch.
        """
        patch = SessionPatch()
        replies = []
        current = session
        depth = 0

        while command is not None:
            command = self._gate(command, current)
            handler = self._handlers.get(command.type)
            if handler is None:
                logger.error(f"No handler for command {command.describe()}, showing menu")
                handler = self._fallback

            raw = await handler(current, command, self._services)
            result = raw if isinstance(raw, HandlerResult) else HandlerResult(message=raw)

            step = to_patch(result)
            patch = patch.merge(step)
            current = step.apply_to(current)
            if result.message:
                replies.append(result.message)

            command = result.follow_up
            depth += 1
            if command is not None and depth > MAX_CHAIN_DEPTH:
                logger.error(f"Handler chain deeper than {MAX_CHAIN_DEPTH}, dropping {command.describe()}")
                break

        return DispatchResult(
            reply="\n\n".join(replies),
            patch=patch,
            menu=current.current_menu,
        )

    # ─── Request Boundary ────────────────────────────────────────────────────

    async def handle_message(self, subscriber_id: str, text: str) -> DispatchResult:
        """
        Full request: ensure session, parse, dispatch, persist.

        Any collaborator failure becomes the generic reply and the session is
        left as it was.
        """
        start = time.perf_counter()
        session = None
        command = None
        try:
            session = await run_in_threadpool(self._store.ensure_session, subscriber_id)
            command = parse(text, ParseContext.from_session(session))
            result = await self.dispatch(command, session)
            await run_in_threadpool(self._store.patch, session.id, result.patch)
        except Exception:
            logger.exception(
                f"Dispatch failed for subscriber {subscriber_id} "
                f"(command={command.describe() if command else None})"
            )
            return DispatchResult(
                reply=MESSAGES["errors"]["generic"],
                patch=SessionPatch(),
                command=command,
                menu=session.current_menu if session else None,
                failed=True,
            )

        result.command = command
        elapsed = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"[{subscriber_id}] {command.describe()}: "
            f"{session.current_menu.value} -> {result.menu.value} ({elapsed}ms)"
        )
        return result
