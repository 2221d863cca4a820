"""Apache "combined" format access log for every HTTP request."""

import logging
import os
from datetime import datetime, timezone

from flask import request

ACCESS_LOGGER_NAME = 'leaderboard.access'
ACCESS_LOG_KEY = 'leaderboard_access_logger'


def format_combined(req, response) -> str:
    stamp = datetime.now(timezone.utc).strftime('%d/%b/%Y:%H:%M:%S +0000')
    path = req.full_path if req.query_string else req.path
    length = response.calculate_content_length()
    return '{addr} - - [{stamp}] "{method} {path} {proto}" {status} {length} "{referrer}" "{agent}"'.format(
        addr=req.remote_addr or '-',
        stamp=stamp,
        method=req.method,
        path=path,
        proto=req.environ.get('SERVER_PROTOCOL', 'HTTP/1.1'),
        status=response.status_code,
        length=length if length is not None else '-',
        referrer=req.referrer or '-',
        agent=req.user_agent.string or '-',
    )


def init_access_log(flask_app) -> None:
    """Attach a combined-format file logger to this app only.

    The logger lives in ``app.extensions[ACCESS_LOG_KEY]``, outside the
    process-wide logging registry.
    """
    path = flask_app.config.get('ACCESS_LOG')
    if not path:
        return
    logger = logging.Logger(ACCESS_LOGGER_NAME, level=logging.INFO)
    handler = logging.FileHandler(os.path.abspath(path), mode='a', encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    flask_app.extensions[ACCESS_LOG_KEY] = logger

    @flask_app.after_request
    def _log_request(response):
        logger.info(format_combined(request, response))
        return response
