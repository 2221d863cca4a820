"""Field checks for incoming player and account input.

The functions here are pure: each returns a ``CheckResult`` and never
raises. Callers run every check for an operation and report all failures
together via ``collect_failures``.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email as _check_email_syntax

NAME_PATTERN = re.compile(r'^[A-Za-z0-9 ]+$')
MIN_PASSWORD_LENGTH = 5
# Column limits: names are String(128), scores a 32-bit Integer
MAX_NAME_LENGTH = 128
MAX_SCORE = 2 ** 31 - 1


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    message: Optional[str] = None


PASSED = CheckResult(True)


def validate_name(name) -> CheckResult:
    if isinstance(name, str) and len(name) <= MAX_NAME_LENGTH and NAME_PATTERN.fullmatch(name):
        return PASSED
    return CheckResult(False, 'Invalid Name.')


def validate_score(score) -> CheckResult:
    # bool is an int subclass; True is not a score
    if isinstance(score, bool):
        return CheckResult(False, 'Invalid score.')
    if isinstance(score, str) and score.isdecimal() and len(score) <= len(str(MAX_SCORE)):
        score = int(score)
    if isinstance(score, int) and 0 <= score <= MAX_SCORE:
        return PASSED
    return CheckResult(False, 'Invalid score.')


def validate_email(email) -> CheckResult:
    if not isinstance(email, str):
        return CheckResult(False, 'Invalid email.')
    try:
        _check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        return CheckResult(False, 'Invalid email.')
    return PASSED


def validate_password(password) -> CheckResult:
    if isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH:
        return PASSED
    return CheckResult(False, 'Password too short.')


def collect_failures(*results: CheckResult) -> List[Dict[str, str]]:
    """Messages of every failed check, in the order the checks were given."""
    return [{'message': r.message} for r in results if not r.ok]
