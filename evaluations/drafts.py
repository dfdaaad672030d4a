"""
Server-side copy of an unfinished evaluation form.

Each browser holds an opaque draft token; the draft itself lives in the
Django cache as one JSON-compatible dict stamped with a schema version and
a millisecond timestamp. A draft written under another version is treated
as missing and removed.
"""
import logging
import time

from django.core.cache import cache

from core.utils import local_today
from .cache_keys import draft_key, DRAFT_TIMEOUT

logger = logging.getLogger(__name__)

DRAFT_VERSION = 1


def _now_ms():
    return int(time.time() * 1000)


def create_empty_draft(today=None):
    today = today or local_today()
    return {
        'evaluator_info': {
            'name': '',
            'age': '',
            'address': '',
            'date': today.isoformat(),
        },
        'selected_lecturers': [],
        'ratings': {},
        'lecturer_comment': '',
        'mosque_suggestion': '',
    }


def validate_draft(draft):
    return (
        isinstance(draft, dict)
        and isinstance(draft.get('version'), int) and not isinstance(draft.get('version'), bool)
        and isinstance(draft.get('timestamp'), (int, float))
        and isinstance(draft.get('evaluator_info'), dict)
        and isinstance(draft.get('selected_lecturers'), list)
        and isinstance(draft.get('ratings'), dict)
    )


def save_draft(token, data, now_ms=None):
    draft = dict(data, version=DRAFT_VERSION, timestamp=now_ms if now_ms is not None else _now_ms())
    cache.set(draft_key(token), draft, DRAFT_TIMEOUT)
    return draft


def load_draft(token):
    draft = cache.get(draft_key(token))
    if draft is None:
        return None
    if not isinstance(draft, dict) or draft.get('version') != DRAFT_VERSION:
        logger.info(f"Discarding stale draft {token}")
        clear_draft(token)
        return None
    return draft


def has_draft(token):
    return load_draft(token) is not None


def clear_draft(token):
    cache.delete(draft_key(token))


def get_draft_age(token, now_ms=None):
    """Age of the stored draft in whole minutes, or None when there is none."""
    draft = load_draft(token)
    if draft is None:
        return None
    now_ms = now_ms if now_ms is not None else _now_ms()
    return int((now_ms - draft['timestamp']) // 60000)


def format_draft_age(minutes):
    if minutes < 1:
        return 'baru sahaja'
    if minutes < 60:
        return f"{minutes} minit yang lalu"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} jam yang lalu"
    return f"{hours // 24} hari yang lalu"
