from dataclasses import dataclass
from typing import Optional

from core.utils import local_today

MONTH_ABBREVIATIONS = [
    'Jan', 'Feb', 'Mac', 'Apr', 'Mei', 'Jun',
    'Jul', 'Ogo', 'Sep', 'Okt', 'Nov', 'Dis'
]

DIRECTION_THRESHOLD = 0.1


@dataclass
class TrendPoint:
    month: int
    year: int
    label: str
    average_score: Optional[float]
    evaluation_count: int


def month_slots(months, today=None):
    """(year, month) pairs for the last ``months`` calendar months, oldest first."""
    today = today or local_today()
    slots = []
    for offset in range(months - 1, -1, -1):
        index = today.year * 12 + (today.month - 1) - offset
        slots.append((index // 12, index % 12 + 1))
    return slots


def calculate_monthly_trend(evaluations, months=6, lecturer_id=None, today=None):
    """
    Monthly average scores ending with the current month.

    A month without evaluations has ``average_score`` None and a count of 0.
    Filtering by lecturer changes the figures but never the number of points.
    """
    if lecturer_id:
        evaluations = [e for e in evaluations if e.lecturer_id == lecturer_id]

    by_month = {}
    for e in evaluations:
        key = (int(e.evaluation_date[:4]), int(e.evaluation_date[5:7]))
        by_month.setdefault(key, []).append(e.score)

    points = []
    for year, month in month_slots(months, today):
        scores = by_month.get((year, month), [])
        points.append(TrendPoint(
            month=month,
            year=year,
            label=f"{MONTH_ABBREVIATIONS[month - 1]} {year}",
            average_score=sum(scores) / len(scores) if scores else None,
            evaluation_count=len(scores),
        ))
    return points


def get_trend_by_lecturer(evaluations, lecturer_id, months=6, today=None):
    return calculate_monthly_trend(evaluations, months, lecturer_id, today=today)


def validate_trend_data(points):
    for point in points:
        if point.evaluation_count == 0:
            if point.average_score is not None:
                return False
        elif point.average_score is None or not 1 <= point.average_score <= 4:
            return False
    return True


def get_trend_labels(points):
    return [p.label for p in points]


def get_trend_values(points):
    return [p.average_score for p in points]


def get_trend_direction(points):
    scores = [p.average_score for p in points if p.average_score is not None]
    if len(scores) < 2:
        return 'insufficient'

    middle = len(scores) // 2
    first, second = scores[:middle], scores[middle:]
    diff = sum(second) / len(second) - sum(first) / len(first)

    if diff > DIRECTION_THRESHOLD:
        return 'improving'
    if diff < -DIRECTION_THRESHOLD:
        return 'declining'
    return 'stable'
