"""Response shapes returned by the resolvers.

Storage rows never leave the resolver layer; they are copied into these
frozen value objects, whose ``to_dict`` is the wire format.
"""

from dataclasses import dataclass
from datetime import datetime, timezone


def iso_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class PlayerView:
    player_id: str
    name: str
    score: int
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, player) -> 'PlayerView':
        return cls(
            player_id=str(player.id),
            name=player.name,
            score=player.score,
            created_at=iso_timestamp(player.created_at),
            updated_at=iso_timestamp(player.updated_at),
        )

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'name': self.name,
            'score': self.score,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }


@dataclass(frozen=True)
class UserView:
    user_id: str
    email: str
    name: str
    is_logged_in: bool = False

    @classmethod
    def from_model(cls, user, is_logged_in=False) -> 'UserView':
        return cls(user_id=str(user.id), email=user.email, name=user.name, is_logged_in=is_logged_in)

    def to_dict(self):
        return {
            'userId': self.user_id,
            'email': self.email,
            'name': self.name,
            'isLoggedIn': self.is_logged_in,
        }


LOGGED_OUT = UserView(user_id='', email='', name='', is_logged_in=False)


@dataclass(frozen=True)
class MessageView:
    message: str

    def to_dict(self):
        return {'message': self.message}
