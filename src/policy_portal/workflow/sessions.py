"""In-memory workflow registry, one workflow per browser session.

Nothing is written anywhere: restarting the process or evicting a session
discards its policy and signature.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from typing import Callable

from policy_portal.workflow.machine import PolicyWorkflow

log = logging.getLogger(__name__)

WorkflowFactory = Callable[[str], PolicyWorkflow]


class WorkflowRegistry:
    """Dict-backed session store, bounded with oldest-first eviction."""

    def __init__(self, factory: WorkflowFactory, *, max_sessions: int = 256) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be >= 1, got {max_sessions}")
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, PolicyWorkflow] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self) -> tuple[str, PolicyWorkflow]:
        session_id = uuid.uuid4().hex
        workflow = self._factory(session_id)
        self._sessions[session_id] = workflow
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            log.info("Evicted session %s", evicted)
        log.debug(f"Created session {session_id}")
        return session_id, workflow

    def get(self, session_id: str) -> PolicyWorkflow:
        if session_id not in self._sessions:
            raise KeyError(f"Unknown session: {session_id}")
        self._sessions.move_to_end(session_id)
        return self._sessions[session_id]

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def list_ids(self) -> list[str]:
        return list(self._sessions)
