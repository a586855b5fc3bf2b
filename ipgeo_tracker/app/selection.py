from __future__ import annotations

from collections.abc import Iterable

from clients.ipgeo_sdk.models import HistoryEntry


class HistorySelection:
    """Ids of history rows picked for bulk removal.

    Holds ids only. A history reload never prunes it: an id whose row is gone
    stays inert until the next ``clear``.
    """

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: set[int] = set(ids)

    def toggle(self, entry_id: int) -> bool:
        if entry_id in self._ids:
            self._ids.discard(entry_id)
            return False
        self._ids.add(entry_id)
        return True

    def clear(self) -> None:
        self._ids.clear()

    def size(self) -> int:
        return len(self._ids)

    def ids(self) -> list[int]:
        return sorted(self._ids)

    def present_in(self, history: Iterable[HistoryEntry]) -> list[int]:
        return sorted(self._ids.intersection(entry.id for entry in history))

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)
