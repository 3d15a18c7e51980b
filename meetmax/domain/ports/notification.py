from __future__ import annotations

from typing import Protocol


class NotificationSink(Protocol):
    """Delivers a rendered message to an address.

    Raises ``DeliveryError`` when the message could not be handed off.
    """

    async def deliver(self, recipient: str, subject: str, body: str) -> None:
        ...


class RequestGate(Protocol):
    """Admits or throttles a request identified by ``key``.

    Raises ``RateLimited`` when the requester is over its allowance.
    """

    def check(self, key: str) -> None:
        ...
