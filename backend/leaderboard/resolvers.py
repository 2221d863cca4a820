"""Leaderboard operations.

One function per query/mutation. Each runs its checks in a fixed order
(authentication, existence, validation, conflict), raising the first
``LeaderboardError`` that applies, then writes through ``leaderboard.store``
and, for player mutations, publishes a change event on the bus it was
given. Events are only published after the write has committed.

Known races: the duplicate-name check in ``create_player`` and the
existence checks in ``update_player``/``delete_player`` are separate round
trips from the write that follows them. Two concurrent creates with the
same name can both succeed, and an update racing a delete can fail with a
store error. Both are accepted at this scale.
"""

from typing import List

from flask import current_app

from leaderboard import store
from leaderboard.auth import end_session, is_logged_in, require_login, start_session
from leaderboard.errors import Conflict, NotFound, ValidationFailed
from leaderboard.events import EventBus, PlayerDeleted, PlayerUpserted
from leaderboard.validation import (
    collect_failures,
    validate_email,
    validate_name,
    validate_password,
    validate_score,
)
from leaderboard.views import LOGGED_OUT, MessageView, PlayerView, UserView


def _player_failures(name, score):
    return collect_failures(validate_name(name), validate_score(score))


# ---- Queries ----

def get_all_players() -> List[PlayerView]:
    return [PlayerView.from_model(p) for p in store.list_players_by_score()]


def session_identity() -> UserView:
    if not is_logged_in():
        return LOGGED_OUT
    user = require_login()
    return UserView.from_model(user, is_logged_in=True)


# ---- Player mutations ----

def create_player(player_input, *, bus: EventBus) -> PlayerView:
    require_login()
    name = player_input.get('name')
    score = player_input.get('score')

    errors = _player_failures(name, score)
    if errors:
        raise ValidationFailed('Invalid input.', errors)

    if store.find_player_by_name(name):
        raise Conflict('Player already exists.', [{'message': 'Duplicate player name.'}])

    created = PlayerView.from_model(store.insert_player(name, int(score)))
    current_app.logger.info(f"[player-create] id={created.player_id} name={created.name!r} score={created.score}")
    bus.publish(PlayerUpserted(created))
    return created


def update_player(player_input, *, bus: EventBus) -> PlayerView:
    require_login()
    player = store.find_player(player_input.get('playerId'))
    if player is None:
        raise NotFound('Player not found.')

    name = player_input.get('name')
    score = player_input.get('score')
    errors = _player_failures(name, score)
    if errors:
        raise ValidationFailed('Invalid input.', errors)

    updated = PlayerView.from_model(store.save_player(player, name, int(score)))
    current_app.logger.info(f"[player-update] id={updated.player_id} name={updated.name!r} score={updated.score}")
    bus.publish(PlayerUpserted(updated))
    return updated


def delete_player(player_id, *, bus: EventBus) -> PlayerView:
    require_login()
    player = store.find_player(player_id)
    if player is None:
        raise NotFound('Player not found.')

    # Snapshot before the row goes away
    deleted = PlayerView.from_model(player)
    store.remove_player(player)
    current_app.logger.info(f"[player-delete] id={deleted.player_id} name={deleted.name!r}")
    bus.publish(PlayerDeleted(deleted))
    return deleted


# ---- Accounts ----

def create_user(user_input, *, requires_login: bool = False) -> UserView:
    if requires_login:
        require_login()
    email = user_input.get('email')
    password = user_input.get('password')
    name = user_input.get('name')

    errors = collect_failures(validate_email(email), validate_password(password), validate_name(name))
    if errors:
        raise ValidationFailed('Invalid input.', errors)

    if store.find_user_by_email(email):
        raise Conflict('User already exists.')

    user = store.insert_user(email, password, name)
    current_app.logger.info(f"[user-create] id={user.id} email={user.email}")
    return UserView.from_model(user)


def login(email, password) -> UserView:
    user = store.find_user_by_email(email) if isinstance(email, str) else None
    if user is None:
        raise NotFound('User not found.')

    if not isinstance(password, str) or not user.check_password(password):
        raise ValidationFailed('Incorrect password.')

    start_session(user)
    current_app.logger.info(f"[login] user={user.id}")
    return UserView.from_model(user, is_logged_in=True)


def logout() -> MessageView:
    user = require_login()
    user_id = user.id
    end_session()
    current_app.logger.info(f"[logout] user={user_id}")
    return MessageView('Logged out successfully.')
