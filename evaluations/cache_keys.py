DRAFT_KEY = "evaluations:draft:{token}"
DRAFT_TIMEOUT = 60 * 60 * 24 * 7   # seconds


def draft_key(token):
    return DRAFT_KEY.format(token=token)
