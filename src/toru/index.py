"""Name index: resolves id-or-name tokens to task ids."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from toru.errors import AmbiguousNameError, NotFoundError, RecordError

if TYPE_CHECKING:
    from toru.tasks.model import Task


def parse_id(token: str) -> int | None:
    """Return *token* as a task id if it is a bare decimal number."""
    if token.isascii() and token.isdigit():
        return int(token)
    return None


class NameIndex:
    """Multimap from task name to the ids of every task with that name."""

    def __init__(self, mapping: Mapping[str, Iterable[int]] | None = None) -> None:
        self._map: dict[str, list[int]] = {}
        for name, ids in (mapping or {}).items():
            bucket = list(ids)
            if bucket:
                self._map[name] = bucket

    @classmethod
    def create(cls, tasks: Iterable[Task]) -> NameIndex:
        index = cls()
        for task in tasks:
            index.insert(task.name, task.id)
        return index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameIndex):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"NameIndex({self.to_dict()!r})"

    def __contains__(self, name: object) -> bool:
        return name in self._map

    def names(self) -> list[str]:
        return sorted(self._map)

    def ids(self, name: str) -> list[int]:
        return list(self._map.get(name, ()))

    def insert(self, name: str, task_id: int) -> None:
        self._map.setdefault(name, []).append(task_id)

    def remove(self, name: str, task_id: int) -> None:
        """Drop *task_id* from *name*'s bucket; the bucket goes once empty.

        The last entry is swapped into the freed slot, so remaining ids may
        change order.
        """
        bucket = self._map.get(name)
        if bucket is None or task_id not in bucket:
            return
        pos = bucket.index(task_id)
        bucket[pos] = bucket[-1]
        bucket.pop()
        if not bucket:
            del self._map[name]

    def lookup(self, token: str) -> int:
        """Resolve an id-or-name token.

        A numeric token is taken as an id without consulting the index;
        that is why task names may not be purely numeric.
        """
        task_id = parse_id(token)
        if task_id is not None:
            return task_id

        ids = self._map.get(token)
        if not ids:
            raise NotFoundError(f"A task by the name {token!r} does not exist")
        if len(ids) > 1:
            raise AmbiguousNameError(token, ids)
        return ids[0]

    # ── serialization ────────────────────────────────────────────

    def to_dict(self) -> dict[str, list[int]]:
        return {name: sorted(self._map[name]) for name in sorted(self._map)}

    @classmethod
    def from_dict(cls, raw: Any) -> NameIndex:
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise RecordError(f"Name index must be a mapping, got {type(raw).__name__}")
        try:
            return cls({str(name): [int(i) for i in (ids or [])] for name, ids in raw.items()})
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Malformed name index: {exc}") from exc
