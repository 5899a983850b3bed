from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

from battle_report.domain.report import BattleReport

MAX_HISTORY = 50
MAX_SESSIONS = 256


@dataclass
class ReportSession:
    reports: list[BattleReport] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def record(self, report: BattleReport) -> None:
        self.reports.append(report)
        if len(self.reports) > MAX_HISTORY:
            del self.reports[: len(self.reports) - MAX_HISTORY]

    def reset(self) -> None:
        self.reports.clear()


# Insertion ordered; the oldest session is evicted first.
_sessions: dict[str, ReportSession] = {}


def get_or_create_session(session_id: str | None) -> tuple[str, ReportSession]:
    if session_id and session_id in _sessions:
        return session_id, _sessions[session_id]

    new_id = str(uuid.uuid4())
    session = ReportSession()
    _sessions[new_id] = session
    while len(_sessions) > MAX_SESSIONS:
        del _sessions[next(iter(_sessions))]
    return new_id, session


def get_session(session_id: str | None) -> ReportSession | None:
    if not session_id:
        return None
    return _sessions.get(session_id)
