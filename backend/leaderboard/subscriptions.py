import threading
from typing import Callable, Dict, List, Optional

from flask import current_app, request
from flask_socketio import emit

from leaderboard import socketio
from leaderboard.api import get_event_bus
from leaderboard.events import PlayerEvent, Subscription, Topic

NAMESPACE = '/leaderboard'
CONNECTIONS_KEY = 'leaderboard_socket_subscriptions'


class ConnectionSubscriptions:
    """Socket id -> that connection's bus subscriptions, one per topic."""

    def __init__(self) -> None:
        self._by_sid: Dict[str, Dict[Topic, Subscription]] = {}
        self._lock = threading.Lock()

    def add(self, sid: str, topic: Topic, subscribe: Callable[[], Subscription]) -> Subscription:
        with self._lock:
            subs = self._by_sid.setdefault(sid, {})
            if topic not in subs:
                subs[topic] = subscribe()
            return subs[topic]

    def remove(self, sid: str, topic: Topic) -> Optional[Subscription]:
        with self._lock:
            subs = self._by_sid.get(sid)
            if not subs:
                return None
            subscription = subs.pop(topic, None)
            if not subs:
                self._by_sid.pop(sid, None)
            return subscription

    def remove_all(self, sid: str) -> List[Subscription]:
        with self._lock:
            return list(self._by_sid.pop(sid, {}).values())

    def connection_count(self) -> int:
        with self._lock:
            return len(self._by_sid)


def get_connections() -> ConnectionSubscriptions:
    return current_app.extensions[CONNECTIONS_KEY]


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _parse_topic(data):
    raw = data.get('topic') if isinstance(data, dict) else None
    try:
        return Topic(raw)
    except ValueError:
        return None


def _forward_to(sid: str):
    def deliver(event: PlayerEvent) -> None:
        socketio.emit(event.topic.value, event.to_payload(), to=sid, namespace=NAMESPACE)
    return deliver


def handle_connect(auth=None):
    emit('connected', {'message': f'Connected to {NAMESPACE}', 'topics': [t.value for t in Topic]})


def handle_subscribe(data=None):
    topic = _parse_topic(data)
    if topic is None:
        emit('error', {'message': f"topic must be one of {[t.value for t in Topic]}"})
        return
    sid = _get_sid()
    bus = get_event_bus()
    get_connections().add(sid, topic, lambda: bus.subscribe(topic, _forward_to(sid), label=f"sid:{sid}"))
    current_app.logger.info(f"[subscribe] sid={sid} topic={topic.value}")
    emit('subscribed', {'topic': topic.value})


def handle_unsubscribe(data=None):
    topic = _parse_topic(data)
    if topic is None:
        emit('error', {'message': f"topic must be one of {[t.value for t in Topic]}"})
        return
    subscription = get_connections().remove(_get_sid(), topic)
    if subscription is not None:
        get_event_bus().unsubscribe(subscription)
    emit('unsubscribed', {'topic': topic.value})


def handle_disconnect(reason=None):
    # Subscriptions live as long as the connection; drop them silently
    bus = get_event_bus()
    for subscription in get_connections().remove_all(_get_sid()):
        bus.unsubscribe(subscription)


def register_socketio_handlers(flask_app) -> None:
    """Register the subscription handlers on the leaderboard namespace."""
    flask_app.extensions[CONNECTIONS_KEY] = ConnectionSubscriptions()
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('subscribe', handle_subscribe, namespace=NAMESPACE)
    socketio.on_event('unsubscribe', handle_unsubscribe, namespace=NAMESPACE)
