"""
Advisory text and risk tiers derived from lecturer score summaries.

All rules work on already aggregated LecturerScore rows plus the raw
records of the same period. The threshold values below are part of the
report wording and must not drift.
"""
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Optional

from core.utils import to_fixed

EXCELLENT = 3.5
GOOD = 3.0
LOW = 2.5
VERY_LOW = 2.0

CRITERIA_NAMES = ('Kesesuaian Tajuk', 'Penguasaan Ilmu', 'Teknik Penyampaian', 'Pengurusan Masa')


@dataclass
class Performer:
    name: str
    score: float


@dataclass
class ReportSummary:
    period: str
    total_evaluations: int
    total_lecturers: int
    average_score: float
    recommendation_yes_percent: float
    top_performer: Optional[str] = None
    needs_attention: Optional[str] = None
    strengths: list = field(default_factory=list)
    improvements: list = field(default_factory=list)


@dataclass
class Insights:
    top_performer: Optional[Performer] = None
    needs_attention: Optional[Performer] = None
    strengths: list = field(default_factory=list)
    improvements: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)
    key_findings: list = field(default_factory=list)


@dataclass
class RiskAssessment:
    lecturer_name: str
    risk_level: str
    factors: list = field(default_factory=list)


@dataclass
class AnalyticsResult:
    summary: ReportSummary
    insights: Insights
    risk_assessment: list


@dataclass
class CriteriaAnalysis:
    avg_q1: float
    avg_q2: float
    avg_q3: float
    avg_q4: float
    strongest: Performer
    weakest: Performer


def generate_analytics(evaluations, lecturer_scores, period):
    total_evaluations = len(evaluations)
    average_score = (
        sum(s.avg_overall for s in lecturer_scores) / len(lecturer_scores)
        if lecturer_scores else 0
    )
    yes = sum(1 for e in evaluations if e.recommend_continue)
    yes_percent = yes / total_evaluations * 100 if total_evaluations else 0

    ranked = sorted(lecturer_scores, key=attrgetter('avg_overall'), reverse=True)
    top = Performer(ranked[0].lecturer_name, ranked[0].avg_overall) if ranked else None
    attention = None
    if ranked and ranked[-1].avg_overall < LOW:
        attention = Performer(ranked[-1].lecturer_name, ranked[-1].avg_overall)

    criteria = analyze_criteria(lecturer_scores)
    strengths = generate_strengths(criteria, average_score, yes_percent)
    improvements = generate_improvements(criteria, average_score, yes_percent)

    summary = ReportSummary(
        period=period,
        total_evaluations=total_evaluations,
        total_lecturers=len(lecturer_scores),
        average_score=average_score,
        recommendation_yes_percent=yes_percent,
        top_performer=top.name if top else None,
        needs_attention=attention.name if attention else None,
        strengths=strengths,
        improvements=improvements,
    )
    insights = Insights(
        top_performer=top,
        needs_attention=attention,
        strengths=strengths,
        improvements=improvements,
        recommendations=generate_recommendations(criteria, lecturer_scores),
        key_findings=generate_key_findings(total_evaluations, average_score, yes_percent, lecturer_scores),
    )
    return AnalyticsResult(
        summary=summary,
        insights=insights,
        risk_assessment=[assess_risk(s) for s in lecturer_scores],
    )


def analyze_criteria(lecturer_scores):
    if not lecturer_scores:
        empty = Performer('Tiada', 0)
        return CriteriaAnalysis(0, 0, 0, 0, strongest=empty, weakest=empty)

    count = len(lecturer_scores)
    averages = [
        sum(getattr(s, attr) for s in lecturer_scores) / count
        for attr in ('avg_q1', 'avg_q2', 'avg_q3', 'avg_q4')
    ]
    ranked = sorted(
        (Performer(name, score) for name, score in zip(CRITERIA_NAMES, averages)),
        key=attrgetter('score'),
        reverse=True,
    )
    return CriteriaAnalysis(*averages, strongest=ranked[0], weakest=ranked[-1])


def generate_strengths(criteria, average_score, yes_percent):
    strengths = []
    if average_score >= EXCELLENT:
        strengths.append('Prestasi keseluruhan cemerlang dengan purata skor melebihi 3.5')
    elif average_score >= GOOD:
        strengths.append('Prestasi keseluruhan baik dengan purata skor melebihi 3.0')

    if yes_percent >= 90:
        strengths.append('Kadar cadangan positif sangat tinggi (>90%)')
    elif yes_percent >= 80:
        strengths.append('Kadar cadangan positif tinggi (>80%)')

    if criteria.strongest.score >= EXCELLENT:
        strengths.append(
            f"{criteria.strongest.name} menunjukkan prestasi cemerlang ({to_fixed(criteria.strongest.score)}/4.00)"
        )
    return strengths


def generate_improvements(criteria, average_score, yes_percent):
    improvements = []
    if average_score < LOW:
        improvements.append('Purata skor keseluruhan perlu ditingkatkan segera')
    elif average_score < GOOD:
        improvements.append('Purata skor keseluruhan boleh diperbaiki')

    if yes_percent < 70:
        improvements.append('Kadar cadangan positif perlu ditingkatkan')

    weakest = criteria.weakest
    if weakest.score < LOW:
        improvements.append(f"{weakest.name} memerlukan perhatian segera ({to_fixed(weakest.score)}/4.00)")
    elif weakest.score < GOOD:
        improvements.append(f"{weakest.name} boleh diperbaiki ({to_fixed(weakest.score)}/4.00)")
    return improvements


def generate_recommendations(criteria, lecturer_scores):
    recommendations = []
    low_performers = [s for s in lecturer_scores if s.avg_overall < LOW]
    if low_performers:
        recommendations.append(
            f"Adakan sesi bimbingan untuk {len(low_performers)} penceramah dengan skor rendah"
        )

    if criteria.avg_q3 < LOW:
        recommendations.append('Anjurkan bengkel teknik penyampaian untuk semua penceramah')
    if criteria.avg_q4 < LOW:
        recommendations.append('Sediakan panduan pengurusan masa kuliah')
    if criteria.avg_q1 < LOW:
        recommendations.append('Kaji semula proses pemilihan tajuk kuliah')

    if lecturer_scores:
        average_yes = sum(s.recommendation_yes_percent for s in lecturer_scores) / len(lecturer_scores)
        if average_yes < 70:
            recommendations.append('Tingkatkan program pembangunan profesional penceramah')
    return recommendations


def generate_key_findings(total_evaluations, average_score, yes_percent, lecturer_scores):
    findings = [
        f"Sebanyak {total_evaluations} penilaian telah dikumpul untuk tempoh ini",
        f"Purata skor keseluruhan adalah {to_fixed(average_score)}/4.00",
        f"{to_fixed(yes_percent, 1)}% penceramah dicadangkan untuk diteruskan",
    ]
    high = sum(1 for s in lecturer_scores if s.avg_overall >= EXCELLENT)
    low = sum(1 for s in lecturer_scores if s.avg_overall < LOW)
    if high:
        findings.append(f"{high} penceramah mencapai prestasi cemerlang (≥3.5)")
    if low:
        findings.append(f"{low} penceramah memerlukan perhatian khusus (<2.5)")
    return findings


def assess_risk(score):
    """Additive risk points for one lecturer: >=50 is high, >=25 medium."""
    points = 0
    factors = []

    if score.avg_overall < VERY_LOW:
        points += 40
        factors.append('Skor purata sangat rendah')
    elif score.avg_overall < LOW:
        points += 25
        factors.append('Skor purata rendah')
    elif score.avg_overall < GOOD:
        points += 10
        factors.append('Skor purata di bawah paras')

    if score.recommendation_yes_percent < 50:
        points += 30
        factors.append('Kadar cadangan positif rendah')
    elif score.recommendation_yes_percent < 70:
        points += 15
        factors.append('Kadar cadangan positif sederhana')

    if score.total_evaluations < 3:
        points += 10
        factors.append('Bilangan penilaian terlalu sedikit')

    if points >= 50:
        level = 'high'
    elif points >= 25:
        level = 'medium'
    else:
        level = 'low'
    return RiskAssessment(lecturer_name=score.lecturer_name, risk_level=level, factors=factors)


def calculate_trend(current_score, previous_score):
    diff = current_score - previous_score
    if diff > 0.1:
        return 'up'
    if diff < -0.1:
        return 'down'
    return 'stable'
