from dataclasses import dataclass
from typing import Optional

from core.services import DEFAULT_ALERT_THRESHOLD
from core.utils import to_fixed

MIN_THRESHOLD = 1.0
MAX_THRESHOLD = 4.0


@dataclass
class LecturerAlert:
    lecturer_id: int
    lecturer_name: str
    average_score: float
    evaluation_count: int
    last_evaluation_date: Optional[str]


def clamp_threshold(threshold):
    return max(MIN_THRESHOLD, min(MAX_THRESHOLD, threshold))


def get_low_score_alerts(evaluations, threshold=DEFAULT_ALERT_THRESHOLD):
    """
    Lecturers whose average evaluation score is below the threshold, worst first.

    Each evaluation contributes the mean of its four answers. Records
    missing either the lecturer id or the lecturer name are ignored.
    """
    threshold = clamp_threshold(threshold)

    groups = {}
    for evaluation in evaluations:
        if not evaluation.lecturer_id or not evaluation.lecturer_name:
            continue
        group = groups.setdefault(evaluation.lecturer_id, {
            'name': evaluation.lecturer_name,
            'scores': [],
            'last_date': None,
        })
        group['scores'].append(evaluation.score)
        if group['last_date'] is None or evaluation.evaluation_date > group['last_date']:
            group['last_date'] = evaluation.evaluation_date

    alerts = []
    for lecturer_id, group in groups.items():
        average = sum(group['scores']) / len(group['scores'])
        if average < threshold:
            alerts.append(LecturerAlert(
                lecturer_id=lecturer_id,
                lecturer_name=group['name'],
                average_score=average,
                evaluation_count=len(group['scores']),
                last_evaluation_date=group['last_date'],
            ))

    alerts.sort(key=lambda a: a.average_score)
    return alerts


def has_low_score_alert(evaluations, lecturer_id, threshold=DEFAULT_ALERT_THRESHOLD):
    return any(a.lecturer_id == lecturer_id for a in get_low_score_alerts(evaluations, threshold))


def get_alert_severity(average_score):
    if average_score < 1.5:
        return 'critical'
    if average_score < 2.0:
        return 'warning'
    return 'none'


def format_alert_message(alert):
    prefix = '⚠️ Kritikal' if get_alert_severity(alert.average_score) == 'critical' else '⚡ Amaran'
    return (
        f"{prefix}: {alert.lecturer_name} mempunyai purata skor "
        f"{to_fixed(alert.average_score)}/4.00 ({alert.evaluation_count} penilaian)"
    )
