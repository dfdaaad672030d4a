"""Ordering and grouping of lecture sessions for the schedule screens."""

WEEKS = range(1, 6)

DAY_ORDER = {
    'Isnin': 1,
    'Selasa': 2,
    'Rabu': 3,
    'Khamis': 4,
    'Jumaat': 5,
    'Sabtu': 6,
    'Ahad': 7,
}

LECTURE_TYPE_ORDER = {
    'Subuh': 1,
    'Tazkirah Jumaat': 2,
    'Maghrib': 3,
}


def _public_key(session):
    return (DAY_ORDER.get(session.day, 0), 0 if session.lecture_type == 'Subuh' else 1)


def admin_sort_key(session):
    return (
        session.week,
        DAY_ORDER.get(session.day, 99),
        LECTURE_TYPE_ORDER.get(session.lecture_type, 99),
    )


def group_sessions_by_week(sessions):
    """
    Group sessions into weeks 1-5 for the public form.

    Every week key is present even when empty. Sessions outside 1-5 are
    dropped. Each week is sorted by day of week with Subuh first on a day,
    and carries the distinct lecturers teaching in it keyed by id.
    """
    grouped = {week: {'sessions': [], 'lecturers': {}} for week in WEEKS}
    for session in sessions:
        if session.week not in grouped:
            continue
        grouped[session.week]['sessions'].append(session)
        if session.lecturer is not None:
            grouped[session.week]['lecturers'][session.lecturer.id] = session.lecturer

    for week in grouped.values():
        week['sessions'].sort(key=_public_key)
    return grouped


def sessions_by_week_for_admin(sessions):
    grouped = {week: [] for week in WEEKS}
    for session in sorted(sessions, key=admin_sort_key):
        if session.week in grouped:
            grouped[session.week].append(session)
    return grouped


def has_required_lecturer_info(session):
    lecturer = session.lecturer
    return (
        lecturer is not None
        and isinstance(lecturer.name, str)
        and len(lecturer.name) > 0
        and isinstance(session.lecture_type, str)
        and isinstance(session.day, str)
    )


def format_lecturer_card_data(session, request=None):
    lecturer = session.lecturer
    image_url = None
    if lecturer is not None and lecturer.image:
        image_url = request.build_absolute_uri(lecturer.image.url) if request else lecturer.image.url
    return {
        'name': (lecturer.name if lecturer is not None else '') or 'Penceramah',
        'image_url': image_url,
        'lecture_type': session.lecture_type,
        'day': session.day,
    }
