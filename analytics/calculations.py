from dataclasses import dataclass
from operator import attrgetter
from typing import Optional

from core.validators import RATING_FIELDS

UNKNOWN_LECTURER = 'Unknown'


@dataclass
class LecturerScore:
    lecturer_id: Optional[int]
    lecturer_name: str
    avg_q1: float
    avg_q2: float
    avg_q3: float
    avg_q4: float
    avg_overall: float
    total_evaluations: int
    recommendation_yes_percent: float = 0.0
    trend: Optional[str] = None
    risk_level: Optional[str] = None


def calculate_lecturer_scores(evaluations, name_by_id):
    """
    Per-lecturer question means, best overall first.

    The overall score is the mean of the four question means. Records with
    no lecturer are left out. Lecturers with equal overall scores keep the
    order in which they were first seen.
    """
    groups = {}
    for evaluation in evaluations:
        if not evaluation.lecturer_id:
            continue
        groups.setdefault(evaluation.lecturer_id, []).append(evaluation)

    scores = []
    for lecturer_id, group in groups.items():
        count = len(group)
        means = [sum(getattr(e, field) for e in group) / count for field in RATING_FIELDS]
        yes = sum(1 for e in group if e.recommend_continue)
        scores.append(LecturerScore(
            lecturer_id=lecturer_id,
            lecturer_name=name_by_id.get(lecturer_id) or UNKNOWN_LECTURER,
            avg_q1=means[0],
            avg_q2=means[1],
            avg_q3=means[2],
            avg_q4=means[3],
            avg_overall=sum(means) / 4,
            total_evaluations=count,
            recommendation_yes_percent=yes / count * 100,
        ))

    return sorted(scores, key=attrgetter('avg_overall'), reverse=True)


def calculate_question_average(evaluations, question):
    if question not in RATING_FIELDS:
        raise ValueError(f"Unknown question field: {question}")
    if not evaluations:
        return 0
    return sum(getattr(e, question) for e in evaluations) / len(evaluations)


def calculate_recommendation_stats(evaluations):
    ya = sum(1 for e in evaluations if e.recommend_continue)
    return {'ya': ya, 'tidak': len(evaluations) - ya}


def count_evaluations_per_lecturer(evaluations):
    counts = {}
    for evaluation in evaluations:
        if not evaluation.lecturer_id:
            continue
        counts[evaluation.lecturer_id] = counts.get(evaluation.lecturer_id, 0) + 1
    return counts


def filter_evaluations(evaluations, lecturer_id=None, week=None, lecture_type=None,
                       date_from=None, date_to=None):
    """Narrow a record list by lecturer, session week, lecture type and an inclusive ISO date range."""
    result = []
    for e in evaluations:
        if lecturer_id and e.lecturer_id != lecturer_id:
            continue
        if week and e.week != week:
            continue
        if lecture_type and e.lecture_type != lecture_type:
            continue
        if date_from and e.evaluation_date < date_from:
            continue
        if date_to and e.evaluation_date > date_to:
            continue
        result.append(e)
    return result


def get_top_lecturers(scores, n):
    return list(scores[:n])


def get_bottom_lecturers(scores, n):
    return sorted(scores, key=attrgetter('avg_overall'))[:n]
