"""Transient banners shown to the user, dismissed automatically after a while."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

ERROR_DURATION = 5.0
SUCCESS_DURATION = 3.0


class BannerKind(str, Enum):
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Banner:
    kind: BannerKind
    message: str
    expires_at: float


class BannerQueue:
    """Banners ordered by arrival; expired ones disappear from `active()`."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._banners: list[Banner] = []

    def error(self, message: str, duration: float = ERROR_DURATION) -> Banner:
        return self._push(BannerKind.ERROR, message, duration)

    def success(self, message: str, duration: float = SUCCESS_DURATION) -> Banner:
        return self._push(BannerKind.SUCCESS, message, duration)

    def active(self) -> list[Banner]:
        now = self.clock()
        self._banners = [banner for banner in self._banners if banner.expires_at > now]
        return list(self._banners)

    def dismiss(self, banner: Banner) -> None:
        if banner in self._banners:
            self._banners.remove(banner)

    def _push(self, kind: BannerKind, message: str, duration: float) -> Banner:
        banner = Banner(kind=kind, message=message, expires_at=self.clock() + duration)
        self._banners.append(banner)
        return banner
