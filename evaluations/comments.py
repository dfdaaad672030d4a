from core.utils import month_bounds
from .models import Evaluation

COMMENT_FIELDS = ('lecturer_comment', 'mosque_suggestion')


def unique_texts(rows, field):
    """
    Drop repeats of the same text by the same evaluator on the same date.

    One submission rating several lecturers stores its comment on every row,
    so only the first row of each (name, date, text) is kept, in input order.
    """
    seen = set()
    result = []
    for row in rows:
        key = (row.evaluator_name, row.evaluation_date, getattr(row, field))
        if key in seen:
            continue
        seen.add(key)
        result.append({
            'id': row.id,
            'evaluator_name': row.evaluator_name,
            'date': row.evaluation_date.isoformat(),
            'text': getattr(row, field),
        })
    return result


def comments_for_month(year, month, field):
    start, end = month_bounds(year, month)
    rows = (
        Evaluation.objects
        .filter(evaluation_date__gte=start, evaluation_date__lt=end)
        .exclude(**{f'{field}__isnull': True})
        .exclude(**{field: ''})
        .order_by('-evaluation_date', '-created_at')
    )
    return unique_texts(rows, field)


def clear_text(field, evaluator_name, evaluation_date, text):
    """Null ``field`` on every row carrying this text; returns the number of rows changed."""
    return (
        Evaluation.objects
        .filter(evaluator_name=evaluator_name, evaluation_date=evaluation_date, **{field: text})
        .update(**{field: None})
    )
