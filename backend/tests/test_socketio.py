from conftest import call
from leaderboard import socketio
from leaderboard.events import Topic
from leaderboard.subscriptions import CONNECTIONS_KEY, NAMESPACE


def _named(received, name):
    return [pkt for pkt in received if pkt['name'] == name]


def _subscribe(sio_client, topic):
    sio_client.emit('subscribe', {'topic': topic}, namespace=NAMESPACE)
    acks = _named(sio_client.get_received(NAMESPACE), 'subscribed')
    assert acks and acks[-1]['args'][0] == {'topic': topic}


def test_connect_announces_topics(sio_client):
    assert sio_client.is_connected(NAMESPACE)
    connected = _named(sio_client.get_received(NAMESPACE), 'connected')
    assert connected
    assert set(connected[0]['args'][0]['topics']) == {'upsertPlayer', 'deletePlayer'}


def test_subscriber_receives_upsert_after_create(auth_client, sio_client):
    sio_client.get_received(NAMESPACE)
    _subscribe(sio_client, 'upsertPlayer')

    created = call(auth_client, 'createPlayer', playerInput={'name': 'Ann', 'score': 12})['data']['createPlayer']

    pushed = _named(sio_client.get_received(NAMESPACE), 'upsertPlayer')
    assert len(pushed) == 1
    assert pushed[0]['args'][0] == {'upsertPlayer': created}


def test_delete_event_carries_prior_record(auth_client, sio_client):
    sio_client.get_received(NAMESPACE)
    _subscribe(sio_client, 'deletePlayer')
    created = call(auth_client, 'createPlayer', playerInput={'name': 'Ann', 'score': 12})['data']['createPlayer']
    # Only subscribed to deletes
    assert _named(sio_client.get_received(NAMESPACE), 'upsertPlayer') == []

    call(auth_client, 'deletePlayer', playerId=created['playerId'])
    pushed = _named(sio_client.get_received(NAMESPACE), 'deletePlayer')
    assert len(pushed) == 1
    payload = pushed[0]['args'][0]['deletePlayer']
    assert (payload['name'], payload['score']) == ('Ann', 12)


def test_multiple_subscribers_each_receive(flask_app, auth_client, sio_client):
    other = socketio.test_client(flask_app, namespace=NAMESPACE)
    try:
        for client in (sio_client, other):
            client.get_received(NAMESPACE)
            _subscribe(client, 'upsertPlayer')

        call(auth_client, 'createPlayer', playerInput={'name': 'Ann', 'score': 1})

        for client in (sio_client, other):
            assert len(_named(client.get_received(NAMESPACE), 'upsertPlayer')) == 1
    finally:
        other.disconnect(namespace=NAMESPACE)


def test_subscribe_is_idempotent(auth_client, sio_client, event_bus):
    sio_client.get_received(NAMESPACE)
    _subscribe(sio_client, 'upsertPlayer')
    _subscribe(sio_client, 'upsertPlayer')
    assert event_bus.subscriber_count(Topic.UPSERT_PLAYER) == 1

    call(auth_client, 'createPlayer', playerInput={'name': 'Ann', 'score': 1})
    assert len(_named(sio_client.get_received(NAMESPACE), 'upsertPlayer')) == 1


def test_unsubscribe_stops_delivery(auth_client, sio_client, event_bus):
    sio_client.get_received(NAMESPACE)
    _subscribe(sio_client, 'upsertPlayer')
    sio_client.emit('unsubscribe', {'topic': 'upsertPlayer'}, namespace=NAMESPACE)
    assert _named(sio_client.get_received(NAMESPACE), 'unsubscribed')
    assert event_bus.subscriber_count(Topic.UPSERT_PLAYER) == 0

    call(auth_client, 'createPlayer', playerInput={'name': 'Ann', 'score': 1})
    assert _named(sio_client.get_received(NAMESPACE), 'upsertPlayer') == []


def test_unknown_topic_is_rejected(sio_client, event_bus):
    sio_client.get_received(NAMESPACE)
    sio_client.emit('subscribe', {'topic': 'everything'}, namespace=NAMESPACE)
    assert _named(sio_client.get_received(NAMESPACE), 'error')
    sio_client.emit('subscribe', None, namespace=NAMESPACE)
    assert _named(sio_client.get_received(NAMESPACE), 'error')
    assert event_bus.subscriber_count() == 0


def test_disconnect_drops_subscriptions(flask_app, event_bus):
    client = socketio.test_client(flask_app, namespace=NAMESPACE)
    _subscribe(client, 'upsertPlayer')
    _subscribe(client, 'deletePlayer')
    assert event_bus.subscriber_count() == 2

    client.disconnect(namespace=NAMESPACE)
    assert event_bus.subscriber_count() == 0


def test_connection_registry_is_per_app(flask_app):
    from leaderboard import create_app
    from conftest import TestConfig

    other_app = create_app(TestConfig)
    connections = flask_app.extensions[CONNECTIONS_KEY]
    assert other_app.extensions[CONNECTIONS_KEY] is not connections

    client = socketio.test_client(flask_app, namespace=NAMESPACE)
    _subscribe(client, 'upsertPlayer')
    assert connections.connection_count() == 1
    assert other_app.extensions[CONNECTIONS_KEY].connection_count() == 0

    client.disconnect(namespace=NAMESPACE)
    assert connections.connection_count() == 0
