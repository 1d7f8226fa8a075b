"""
Dismissable user-facing notices raised by the feed.
"""

import uuid
from collections import deque
from datetime import datetime
from typing import Deque, Iterator, List, Literal, Optional

from pydantic import BaseModel, Field

from idearoulette.utils.constants import NOTICE_LIMIT
from idearoulette.utils.mongodb_client import utcnow

NoticeVariant = Literal["default", "destructive", "success"]


class Notice(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:7])
    title: str
    description: str = ""
    variant: NoticeVariant = "default"
    created_at: datetime = Field(default_factory=utcnow)


class NoticeBoard:
    """Bounded queue of notices; the oldest falls off when full."""

    def __init__(self, limit: int = NOTICE_LIMIT):
        self._notices: Deque[Notice] = deque(maxlen=limit)

    def push(self, title: str, description: str = "", variant: NoticeVariant = "default") -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self._notices.append(notice)
        return notice

    def dismiss(self, notice_id: str) -> bool:
        for notice in self._notices:
            if notice.id == notice_id:
                self._notices.remove(notice)
                return True
        return False

    def pop_all(self) -> List[Notice]:
        notices = list(self._notices)
        self._notices.clear()
        return notices

    @property
    def latest(self) -> Optional[Notice]:
        return self._notices[-1] if self._notices else None

    def __iter__(self) -> Iterator[Notice]:
        return iter(list(self._notices))

    def __len__(self) -> int:
        return len(self._notices)
