from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.utils import quantize, round_half_up
from .calculations import UNKNOWN_LECTURER

COMPARISON_LABELS = ['Tajuk', 'Ilmu', 'Penyampaian', 'Masa']

COMPARISON_COLORS = [
    'rgba(59, 130, 246, 0.8)',   # blue
    'rgba(16, 185, 129, 0.8)',   # green
    'rgba(245, 158, 11, 0.8)',   # amber
    'rgba(239, 68, 68, 0.8)',    # red
    'rgba(139, 92, 246, 0.8)',   # purple
    'rgba(236, 72, 153, 0.8)',   # pink
    'rgba(20, 184, 166, 0.8)',   # teal
    'rgba(249, 115, 22, 0.8)',   # orange
]


@dataclass
class LecturerComparison:
    lecturer_id: Optional[int]
    lecturer_name: str
    avg_q1: float = 0
    avg_q2: float = 0
    avg_q3: float = 0
    avg_q4: float = 0
    avg_overall: float = 0
    recommendation_yes_percent: float = 0
    recommendation_no_percent: float = 0
    total_evaluations: int = 0


def calculate_lecturer_comparison(evaluations, lecturers, lecturer_ids):
    """
    Side-by-side figures for the requested lecturers, in request order.

    ``lecturers`` maps id to name. A lecturer without evaluations gets zeros
    everywhere. Question means and the overall mean are rounded to two
    places after averaging; the yes/no percentages to one place, with the
    no share taken from the rounded yes share so the pair adds up to 100.
    """
    results = []
    for lecturer_id in lecturer_ids:
        name = lecturers.get(lecturer_id) or UNKNOWN_LECTURER
        matching = [e for e in evaluations if e.lecturer_id == lecturer_id]
        total = len(matching)
        if total == 0:
            results.append(LecturerComparison(lecturer_id=lecturer_id, lecturer_name=name))
            continue

        means = [sum(e.ratings[i] for e in matching) / total for i in range(4)]
        yes = sum(1 for e in matching if e.recommend_continue)
        yes_percent = quantize(yes / total * 100, 1)
        no_percent = Decimal(100) - yes_percent

        results.append(LecturerComparison(
            lecturer_id=lecturer_id,
            lecturer_name=name,
            avg_q1=round_half_up(means[0]),
            avg_q2=round_half_up(means[1]),
            avg_q3=round_half_up(means[2]),
            avg_q4=round_half_up(means[3]),
            avg_overall=round_half_up(sum(means) / 4),
            recommendation_yes_percent=float(yes_percent),
            recommendation_no_percent=float(no_percent),
            total_evaluations=total,
        ))
    return results


def get_comparison_labels():
    return list(COMPARISON_LABELS)


def get_comparison_values(comparison):
    return [comparison.avg_q1, comparison.avg_q2, comparison.avg_q3, comparison.avg_q4]


def get_comparison_colors(count):
    """One colour per lecturer; the palette repeats past its length."""
    return [COMPARISON_COLORS[i % len(COMPARISON_COLORS)] for i in range(max(count, 0))]
