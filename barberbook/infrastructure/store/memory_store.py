from __future__ import annotations

import uuid
from collections import OrderedDict

from barberbook.application.ports.session_store import SessionOwner, SessionStorePort


class MemorySessionStore(SessionStorePort):
    """Keeps the most recent booking sessions in process memory, oldest evicted first."""

    def __init__(self, session_limit: int = 500) -> None:
        self._owners: OrderedDict[str, SessionOwner] = OrderedDict()
        self._session_limit = session_limit

    def new_session_id(self) -> str:
        return uuid.uuid4().hex

    def put(self, owner: SessionOwner) -> None:
        session_id = owner.session.session_id
        self._owners[session_id] = owner
        self._owners.move_to_end(session_id)
        while len(self._owners) > self._session_limit:
            self._owners.popitem(last=False)

    def get(self, session_id: str) -> SessionOwner | None:
        return self._owners.get(session_id)
