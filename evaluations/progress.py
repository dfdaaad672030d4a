import math
from dataclasses import dataclass, field
from typing import Optional

EVALUATOR_FIELDS = ('name', 'age', 'address', 'date')

WEIGHTS = {
    'evaluator_info': 30,
    'lecturer_selection': 20,
    'ratings': 50,
}


@dataclass
class RatingState:
    q1_topic: Optional[int] = None
    q2_knowledge: Optional[int] = None
    q3_delivery: Optional[int] = None
    q4_time: Optional[int] = None

    def answered(self):
        values = (self.q1_topic, self.q2_knowledge, self.q3_delivery, self.q4_time)
        return sum(1 for v in values if v is not None)


@dataclass
class FormState:
    evaluator_info: dict = field(default_factory=dict)
    selected_lecturers: list = field(default_factory=list)
    ratings: dict = field(default_factory=dict)

    @classmethod
    def from_draft(cls, draft):
        ratings = {}
        for lecturer_id, values in (draft.get('ratings') or {}).items():
            values = values or {}
            ratings[str(lecturer_id)] = RatingState(
                q1_topic=values.get('q1_topic'),
                q2_knowledge=values.get('q2_knowledge'),
                q3_delivery=values.get('q3_delivery'),
                q4_time=values.get('q4_time'),
            )
        return cls(
            evaluator_info=draft.get('evaluator_info') or {},
            selected_lecturers=[str(i) for i in draft.get('selected_lecturers') or []],
            ratings=ratings,
        )


def _round(value):
    # halves round up
    return math.floor(value + 0.5)


def is_field_filled(value):
    if isinstance(value, str):
        return value.strip() != ''
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value > 0
    return False


def calculate_evaluator_progress(info):
    return sum(25 for name in EVALUATOR_FIELDS if is_field_filled(info.get(name)))


def calculate_ratings_progress(selected_lecturers, ratings):
    """Share of the four answers filled in, across every selected lecturer (0-100)."""
    if not selected_lecturers:
        return 0
    total = 4 * len(selected_lecturers)
    completed = 0
    for lecturer_id in selected_lecturers:
        state = ratings.get(lecturer_id)
        if state is not None:
            completed += state.answered()
    return _round(completed / total * 100)


def calculate_progress(state):
    progress = calculate_evaluator_progress(state.evaluator_info) / 100 * WEIGHTS['evaluator_info']
    if state.selected_lecturers:
        progress += WEIGHTS['lecturer_selection']
        ratings = calculate_ratings_progress(state.selected_lecturers, state.ratings)
        progress += ratings / 100 * WEIGHTS['ratings']
    return _round(progress)


def is_form_complete(state):
    return calculate_progress(state) == 100


def get_progress_status(progress):
    if progress == 0:
        return 'Belum mula'
    if progress < 30:
        return 'Baru bermula'
    if progress < 60:
        return 'Separuh siap'
    if progress < 100:
        return 'Hampir siap'
    return 'Sedia untuk hantar'


def get_progress_color(progress):
    if progress < 30:
        return 'progress-low'
    if progress < 60:
        return 'progress-medium'
    if progress < 100:
        return 'progress-high'
    return 'progress-complete'
