from analytics.records import EvaluationRecord


def record(q1, q2=None, q3=None, q4=None, **kwargs):
    """Evaluation record with every answer equal to ``q1`` unless given."""
    return EvaluationRecord(
        q1_topic=q1,
        q2_knowledge=q1 if q2 is None else q2,
        q3_delivery=q1 if q3 is None else q3,
        q4_time=q1 if q4 is None else q4,
        **kwargs
    )
