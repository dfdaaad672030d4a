import logging
from dataclasses import dataclass, field
from datetime import timedelta

from analytics.calculations import calculate_lecturer_scores, calculate_recommendation_stats
from analytics.insights import generate_analytics, assess_risk, calculate_trend
from analytics.records import records_from_queryset
from evaluations.filters import EvaluationFilter
from evaluations.models import Evaluation
from lectures.models import Lecturer

logger = logging.getLogger(__name__)

DEFAULT_TITLE = 'Laporan Penilaian Kuliah'


def period_label(date_from, date_to):
    if date_from and date_to:
        return f"{date_from.isoformat()} - {date_to.isoformat()}"
    if date_from:
        return f"Dari {date_from.isoformat()}"
    if date_to:
        return f"Hingga {date_to.isoformat()}"
    return 'Semua tempoh'


def previous_period(date_from, date_to):
    """The range of equal length that ends the day before `date_from`."""
    length = (date_to - date_from).days
    end = date_from - timedelta(days=1)
    return end - timedelta(days=length), end


def lecturer_names():
    return dict(Lecturer.objects.values_list('id', 'name'))


def annotate_scores(scores, previous_scores):
    """Fill in each score's trend against the previous period and its risk level."""
    before = {s.lecturer_id: s.avg_overall for s in previous_scores}
    for score in scores:
        if score.lecturer_id in before:
            score.trend = calculate_trend(score.avg_overall, before[score.lecturer_id])
        score.risk_level = assess_risk(score).risk_level
    return scores


@dataclass
class ReportContext:
    """Everything the report screen and the exports need for one set of filters."""
    filters: dict
    evaluations: list
    scores: list
    previous_scores: list = field(default_factory=list)
    previous_label: str = ''

    @property
    def date_from(self):
        return self.filters.get('date_from')

    @property
    def date_to(self):
        return self.filters.get('date_to')

    @property
    def period(self):
        return period_label(self.date_from, self.date_to)

    @property
    def has_previous_period(self):
        return bool(self.date_from and self.date_to)

    def analytics(self):
        return generate_analytics(self.evaluations, self.scores, self.period)

    def score_change_percent(self):
        if not self.previous_scores:
            return None
        current = sum(s.avg_overall for s in self.scores) / len(self.scores) if self.scores else 0
        previous = sum(s.avg_overall for s in self.previous_scores) / len(self.previous_scores)
        if not previous:
            return None
        return (current - previous) / previous * 100

    def pdf_payload(self, title=None):
        stats = calculate_recommendation_stats(self.evaluations)
        dates = sorted(e.evaluation_date for e in self.evaluations)
        date_from = self.date_from.isoformat() if self.date_from else (dates[0] if dates else None)
        date_to = self.date_to.isoformat() if self.date_to else (dates[-1] if dates else None)
        analytics = self.analytics()
        change = self.score_change_percent()
        return {
            'title': title or DEFAULT_TITLE,
            'date_range': {'from': date_from, 'to': date_to},
            'summary_stats': {
                'total_evaluations': len(self.evaluations),
                'average_score': analytics.summary.average_score,
                'recommendation_yes': stats['ya'],
                'recommendation_no': stats['tidak'],
            },
            'lecturer_scores': self.scores,
            'evaluations': self.evaluations,
            'insights': analytics.insights,
            'comparison': {'change_percent': {'score': change}} if change is not None else None,
        }


def _scores_for(queryset, names):
    evaluations = records_from_queryset(queryset)
    return evaluations, calculate_lecturer_scores(evaluations, names)


def build_report_context(params):
    """
    Apply the evaluation filters from `params` and aggregate the result.

    When both dates are given, the same filters are also applied to the
    previous period of equal length for trends and comparisons.
    Returns (context, errors); errors is a dict of invalid filters or None.
    """
    filterset = EvaluationFilter(params, queryset=Evaluation.objects.all())
    if not filterset.is_valid():
        return None, filterset.errors

    filters = filterset.form.cleaned_data
    names = lecturer_names()
    evaluations, scores = _scores_for(filterset.qs, names)
    context = ReportContext(filters=filters, evaluations=evaluations, scores=scores)

    if context.has_previous_period:
        start, end = previous_period(context.date_from, context.date_to)
        previous_params = params.copy()
        previous_params['date_from'] = start.isoformat()
        previous_params['date_to'] = end.isoformat()
        previous = EvaluationFilter(previous_params, queryset=Evaluation.objects.all())
        _, context.previous_scores = _scores_for(previous.qs, names)
        context.previous_label = period_label(start, end)

    annotate_scores(context.scores, context.previous_scores)
    logger.info(f"Report for {context.period}: {len(evaluations)} evaluation(s), {len(scores)} lecturer(s)")
    return context, None
