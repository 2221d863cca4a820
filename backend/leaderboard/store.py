"""Persistence for players and user accounts.

Thin wrappers over the SQLAlchemy session. Each write commits on its own;
there are no transactions spanning calls, so a lookup followed by a write
is two separate round trips. Store errors propagate unchanged.
"""

from typing import List, Optional

from leaderboard import db
from leaderboard.models import Player, User


def _row_id(raw) -> Optional[int]:
    # Ids are opaque to callers; anything that isn't ours can't match a row
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.isdecimal():
        return int(raw)
    return None


def list_players_by_score() -> List[Player]:
    return Player.query.order_by(Player.score.desc(), Player.id.asc()).all()


def find_player(player_id) -> Optional[Player]:
    row_id = _row_id(player_id)
    if row_id is None:
        return None
    return db.session.get(Player, row_id)


def find_player_by_name(name: str) -> Optional[Player]:
    return Player.query.filter_by(name=name).first()


def insert_player(name: str, score: int) -> Player:
    player = Player(name=name, score=score)
    db.session.add(player)
    db.session.commit()
    return player


def save_player(player: Player, name: str, score: int) -> Player:
    player.name = name
    player.score = score
    db.session.add(player)
    db.session.commit()
    return player


def remove_player(player: Player) -> None:
    db.session.delete(player)
    db.session.commit()


def find_user(user_id) -> Optional[User]:
    row_id = _row_id(user_id)
    if row_id is None:
        return None
    return db.session.get(User, row_id)


def find_user_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=email).first()


def insert_user(email: str, password: str, name: str) -> User:
    user = User(email=email, name=name)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user
