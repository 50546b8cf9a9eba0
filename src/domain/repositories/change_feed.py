"""Change feed protocol for subscription-style reads."""

from typing import Any, AsyncContextManager, Protocol


class IChangeFeed(Protocol):
    """Publish/subscribe hub keyed by topic."""

    def publish(self, topics: list[str], event: str, payload: dict[str, Any] | None = None) -> None:
        """Deliver an event to every subscriber of any of the topics."""
        ...

    def subscribe(self, topics: list[str]) -> AsyncContextManager[Any]:
        """Open a subscription; leaving the context unregisters it."""
        ...
