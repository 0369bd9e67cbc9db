# tests/fakes.py
"""
In-memory stand-ins for the service's collaborators.

FakePrisma implements only the slice of the prisma-client-py asyncio API the
store and linker use: create / find_unique / find_many / update / delete /
upsert, with equality and gte/lte/gt/lt/equals filters.
"""

from datetime import timedelta
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from core.errors import UpstreamError
from core.intent import Intent


class FakeRecord(SimpleNamespace):
    pass


def _copy(record: FakeRecord) -> FakeRecord:
    return FakeRecord(**vars(record))


def _matches(record: FakeRecord, where: Optional[Dict[str, Any]]) -> bool:
    for key, cond in (where or {}).items():
        value = getattr(record, key, None)
        if isinstance(cond, dict):
            for op, expected in cond.items():
                if op == "equals" and value != expected:
                    return False
                if op == "gte" and (value is None or value < expected):
                    return False
                if op == "lte" and (value is None or value > expected):
                    return False
                if op == "gt" and (value is None or value <= expected):
                    return False
                if op == "lt" and (value is None or value >= expected):
                    return False
        elif value != cond:
            return False
    return True


class FakeTable:
    def __init__(self, key: str):
        self.key = key
        self.rows: Dict[Any, FakeRecord] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _find(self, where: Dict[str, Any]) -> Optional[FakeRecord]:
        for record in self.rows.values():
            if _matches(record, where):
                return record
        return None

    async def create(self, data: Dict[str, Any]) -> FakeRecord:
        self._check()
        record = FakeRecord(**data)
        self.rows[getattr(record, self.key)] = record
        return _copy(record)

    async def find_unique(self, where: Dict[str, Any]) -> Optional[FakeRecord]:
        self._check()
        record = self._find(where)
        return _copy(record) if record else None

    async def find_many(self, where: Optional[Dict[str, Any]] = None) -> List[FakeRecord]:
        self._check()
        return [_copy(r) for r in self.rows.values() if _matches(r, where)]

    async def update(self, where: Dict[str, Any], data: Dict[str, Any]) -> Optional[FakeRecord]:
        self._check()
        record = self._find(where)
        if record is None:
            return None
        for key, value in data.items():
            setattr(record, key, value)
        return _copy(record)

    async def delete(self, where: Dict[str, Any]) -> Optional[FakeRecord]:
        self._check()
        record = self._find(where)
        if record is None:
            return None
        del self.rows[getattr(record, self.key)]
        return record

    async def upsert(self, where: Dict[str, Any], data: Dict[str, Dict[str, Any]]) -> FakeRecord:
        self._check()
        if self._find(where) is not None:
            return await self.update(where, data["update"])
        return await self.create(data["create"])


class FakePrisma:
    def __init__(self):
        self.expense = FakeTable("id")
        self.linktoken = FakeTable("token")
        self.usermapping = FakeTable("chat_user_id")


class MutableClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeEngine:
    """
    Scripted ExtractionEngine. Each attribute holds the value to return,
    or an exception instance to raise. Every call is recorded in `calls`.
    """

    def __init__(self):
        self.intent: Any = None
        self.expense: Any = None
        self.query: Any = None
        self.calls: List[tuple] = []

    @staticmethod
    def _result(value: Any) -> Any:
        if isinstance(value, Exception):
            raise value
        return value

    def called(self, name: str) -> List[Dict[str, Any]]:
        return [kwargs for call, kwargs in self.calls if call == name]

    async def classify_intent(self, text, *, has_image=False) -> Optional[Intent]:
        self.calls.append(("classify_intent", {"text": text, "has_image": has_image}))
        if has_image:
            return Intent.LOG
        return self._result(self.intent)

    async def extract_expense(self, text=None, image=None):
        self.calls.append(("extract_expense", {"text": text, "image": image}))
        return self._result(self.expense)

    async def extract_query(self, text, today):
        self.calls.append(("extract_query", {"text": text, "today": today}))
        return self._result(self.query)


class FakeTransport:
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.photos: Dict[str, bytes] = {}

    async def send_message(self, chat_id, text, parse_mode=None) -> None:
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})

    async def download_photo(self, file_id: str) -> bytes:
        if file_id not in self.photos:
            raise UpstreamError("Failed to fetch file from Telegram")
        return self.photos[file_id]
