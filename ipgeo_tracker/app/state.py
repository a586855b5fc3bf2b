from __future__ import annotations

from dataclasses import dataclass

from clients.ipgeo_sdk.models import User


@dataclass
class SessionState:
    user: User | None = None
    in_flight: int = 0

    @property
    def loading(self) -> bool:
        return self.in_flight > 0

    def is_authenticated(self) -> bool:
        return self.user is not None

    def apply_user(self, user: User) -> None:
        self.user = user

    def begin_call(self) -> None:
        self.in_flight += 1

    def end_call(self) -> None:
        self.in_flight = max(0, self.in_flight - 1)

    def clear(self) -> None:
        self.user = None
