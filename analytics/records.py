from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EvaluationRecord:
    """
    Read-only snapshot of one stored evaluation.

    Built once from the ORM row so every aggregate below works on already
    validated, plain values. The date is kept as an ISO string so that
    string comparison orders it chronologically.
    """
    q1_topic: int
    q2_knowledge: int
    q3_delivery: int
    q4_time: int
    lecturer_id: Optional[int] = None
    lecturer_name: Optional[str] = None
    evaluation_date: str = ''
    recommend_continue: Optional[bool] = None
    id: Optional[int] = None
    session_id: Optional[int] = None
    week: Optional[int] = None
    lecture_type: Optional[str] = None
    evaluator_name: str = ''
    age: Optional[int] = None
    address: str = ''
    lecturer_comment: Optional[str] = None
    mosque_suggestion: Optional[str] = None

    @property
    def ratings(self):
        return (self.q1_topic, self.q2_knowledge, self.q3_delivery, self.q4_time)

    @property
    def score(self):
        return sum(self.ratings) / 4

    @classmethod
    def from_model(cls, evaluation):
        lecturer = evaluation.lecturer
        session = evaluation.session
        return cls(
            id=evaluation.id,
            lecturer_id=evaluation.lecturer_id,
            lecturer_name=lecturer.name if lecturer is not None else None,
            session_id=evaluation.session_id,
            week=session.week if session is not None else None,
            lecture_type=session.lecture_type if session is not None else None,
            evaluator_name=evaluation.evaluator_name,
            age=evaluation.age,
            address=evaluation.address,
            evaluation_date=evaluation.evaluation_date.isoformat(),
            q1_topic=evaluation.q1_topic,
            q2_knowledge=evaluation.q2_knowledge,
            q3_delivery=evaluation.q3_delivery,
            q4_time=evaluation.q4_time,
            recommend_continue=evaluation.recommend_continue,
            lecturer_comment=evaluation.lecturer_comment,
            mosque_suggestion=evaluation.mosque_suggestion,
        )


def records_from_queryset(queryset):
    return [EvaluationRecord.from_model(e) for e in queryset.select_related('lecturer', 'session')]
