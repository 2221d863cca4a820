from flask import Blueprint, current_app, jsonify, request

from leaderboard import db, resolvers
from leaderboard.errors import BadRequest, InternalError, LeaderboardError
from leaderboard.events import EventBus

api = Blueprint('api', __name__)

EVENT_BUS_KEY = 'leaderboard_event_bus'


def get_event_bus() -> EventBus:
    return current_app.extensions[EVENT_BUS_KEY]


def _input(variables, key):
    value = variables.get(key)
    return value if isinstance(value, dict) else {}


def _get_all_players(variables):
    return [p.to_dict() for p in resolvers.get_all_players()]


def _session(variables):
    return resolvers.session_identity().to_dict()


def _create_player(variables):
    return resolvers.create_player(_input(variables, 'playerInput'), bus=get_event_bus()).to_dict()


def _update_player(variables):
    return resolvers.update_player(_input(variables, 'playerInput'), bus=get_event_bus()).to_dict()


def _delete_player(variables):
    return resolvers.delete_player(variables.get('playerId'), bus=get_event_bus()).to_dict()


def _create_user(variables):
    requires_login = bool(current_app.config.get('REGISTRATION_REQUIRES_LOGIN', False))
    return resolvers.create_user(_input(variables, 'userInput'), requires_login=requires_login).to_dict()


def _login(variables):
    return resolvers.login(variables.get('email'), variables.get('password')).to_dict()


def _logout(variables):
    return resolvers.logout().to_dict()


OPERATIONS = {
    # queries
    'getAllPlayers': _get_all_players,
    'session': _session,
    # mutations
    'createPlayer': _create_player,
    'updatePlayer': _update_player,
    'deletePlayer': _delete_player,
    'createUser': _create_user,
    'login': _login,
    'logout': _logout,
}


def _failure(error: LeaderboardError):
    # Application failures still travel as HTTP 200; clients read `errors`
    return jsonify({'data': None, 'errors': [error.to_dict()]}), 200


@api.route('/leaderboard', methods=['POST', 'OPTIONS'])
def execute():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _failure(BadRequest('Request body must be a JSON object.'))

    operation = body.get('operation')
    handler = OPERATIONS.get(operation) if isinstance(operation, str) else None
    if handler is None:
        return _failure(BadRequest(f"Unknown operation: {operation!r}"))

    variables = body.get('variables') or {}
    if not isinstance(variables, dict):
        return _failure(BadRequest('variables must be a JSON object.'))

    try:
        result = handler(variables)
    except LeaderboardError as err:
        current_app.logger.info(f"[{operation}] failed status={err.status} message={err.message!r}")
        return _failure(err)
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[{operation}] unexpected failure")
        return _failure(InternalError())

    return jsonify({'data': {operation: result}}), 200
