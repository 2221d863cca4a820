"""In-process publish/subscribe for player change notifications.

Contract:
  - ``subscribe(topic, listener)`` registers a listener and returns its handle.
  - ``unsubscribe(handle)`` removes it; unknown handles are ignored.
  - ``publish(event)`` calls every listener registered on the event's topic
    at the time of the call. Late subscribers never see earlier events.

There is no replay, durability or backpressure. Listeners are expected to
hand the event off quickly (e.g. queue a socket emit); whatever buffering
happens downstream is unbounded.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Dict, List, Optional

from leaderboard.views import PlayerView

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    UPSERT_PLAYER = 'upsertPlayer'
    DELETE_PLAYER = 'deletePlayer'


@dataclass(frozen=True)
class PlayerEvent:
    player: PlayerView

    entity_kind: ClassVar[str] = 'player'
    topic: ClassVar[Topic]
    operation: ClassVar[str]

    def to_payload(self) -> Dict[str, dict]:
        return {self.topic.value: self.player.to_dict()}


@dataclass(frozen=True)
class PlayerUpserted(PlayerEvent):
    topic: ClassVar[Topic] = Topic.UPSERT_PLAYER
    operation: ClassVar[str] = 'upsert'


@dataclass(frozen=True)
class PlayerDeleted(PlayerEvent):
    topic: ClassVar[Topic] = Topic.DELETE_PLAYER
    operation: ClassVar[str] = 'delete'


Listener = Callable[[PlayerEvent], None]


@dataclass(frozen=True, eq=False)
class Subscription:
    """Handle for one registered listener. Compared by identity."""

    topic: Topic
    listener: Listener
    label: Optional[str] = field(default=None, compare=False)


class EventBus:
    def __init__(self) -> None:
        self._by_topic: Dict[Topic, List[Subscription]] = {topic: [] for topic in Topic}
        self._lock = threading.Lock()

    def subscribe(self, topic, listener: Listener, label: Optional[str] = None) -> Subscription:
        subscription = Subscription(topic=Topic(topic), listener=listener, label=label)
        with self._lock:
            self._by_topic[subscription.topic].append(subscription)
        logger.debug("subscribed %s to %s", label or listener, subscription.topic.value)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        with self._lock:
            listeners = self._by_topic.get(subscription.topic, [])
            for idx, existing in enumerate(listeners):
                if existing is subscription:
                    del listeners[idx]
                    return True
        return False

    def publish(self, event: PlayerEvent) -> int:
        """Deliver ``event`` to current listeners; returns how many received it."""
        with self._lock:
            listeners = list(self._by_topic[event.topic])

        if not listeners:
            return 0

        delivered = 0
        dead: List[Subscription] = []
        for subscription in listeners:
            try:
                subscription.listener(event)
                delivered += 1
            except Exception:
                logger.exception(
                    "listener %s failed on %s; dropping it",
                    subscription.label or subscription.listener, event.topic.value,
                )
                dead.append(subscription)

        for subscription in dead:
            self.unsubscribe(subscription)
        return delivered

    def subscriber_count(self, topic=None) -> int:
        with self._lock:
            if topic is not None:
                return len(self._by_topic[Topic(topic)])
            return sum(len(listeners) for listeners in self._by_topic.values())
