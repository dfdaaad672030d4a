from itertools import product

from django.test import SimpleTestCase

from analytics.calculations import (
    calculate_lecturer_scores, calculate_question_average, calculate_recommendation_stats,
    count_evaluations_per_lecturer, filter_evaluations, get_top_lecturers, get_bottom_lecturers,
)
from .factories import record


class LecturerScoresTests(SimpleTestCase):
    def setUp(self):
        self.names = {1: 'Ustaz Ali', 2: 'Ustaz Abu', 3: 'Ustazah Aminah'}

    def test_sorted_best_first_and_null_lecturer_excluded(self):
        evaluations = [
            record(2, lecturer_id=1),
            record(4, lecturer_id=2),
            record(3, lecturer_id=3),
            record(1, lecturer_id=None),
            record(3, lecturer_id=1),
        ]
        scores = calculate_lecturer_scores(evaluations, self.names)

        self.assertEqual([s.lecturer_id for s in scores], [2, 3, 1])
        self.assertEqual(scores[0].avg_overall, 4)
        self.assertEqual(scores[-1].avg_overall, 2.5)
        self.assertEqual(scores[-1].total_evaluations, 2)
        self.assertEqual(sum(s.total_evaluations for s in scores), 4)

    def test_overall_is_mean_of_question_means(self):
        evaluations = [record(4, 3, 2, 1, lecturer_id=1), record(2, 2, 4, 4, lecturer_id=1)]
        score = calculate_lecturer_scores(evaluations, self.names)[0]

        self.assertEqual((score.avg_q1, score.avg_q2, score.avg_q3, score.avg_q4), (3, 2.5, 3, 2.5))
        self.assertEqual(score.avg_overall, 2.75)
        per_record = sum(e.score for e in evaluations) / len(evaluations)
        self.assertAlmostEqual(score.avg_overall, per_record)

    def test_mean_of_means_matches_per_record_mean_for_many_groups(self):
        answers = list(product([1, 2, 3, 4], repeat=4))
        for size in (1, 3, 7):
            evaluations = [record(*answers[(i * 37) % len(answers)], lecturer_id=1) for i in range(size)]
            score = calculate_lecturer_scores(evaluations, self.names)[0]
            per_record = sum(e.score for e in evaluations) / size
            self.assertAlmostEqual(score.avg_overall, per_record)

    def test_ties_keep_first_seen_order(self):
        evaluations = [record(3, lecturer_id=3), record(3, lecturer_id=1), record(3, lecturer_id=2)]
        scores = calculate_lecturer_scores(evaluations, self.names)
        self.assertEqual([s.lecturer_id for s in scores], [3, 1, 2])

    def test_unknown_lecturer_name(self):
        scores = calculate_lecturer_scores([record(3, lecturer_id=99)], self.names)
        self.assertEqual(scores[0].lecturer_name, 'Unknown')

    def test_recommendation_share_per_lecturer(self):
        evaluations = [
            record(3, lecturer_id=1, recommend_continue=True),
            record(3, lecturer_id=1, recommend_continue=False),
            record(3, lecturer_id=1, recommend_continue=None),
            record(3, lecturer_id=1, recommend_continue=True),
        ]
        self.assertEqual(calculate_lecturer_scores(evaluations, self.names)[0].recommendation_yes_percent, 50)

    def test_top_and_bottom(self):
        evaluations = [record(n, lecturer_id=n) for n in (1, 2, 3, 4)]
        scores = calculate_lecturer_scores(evaluations, {})
        self.assertEqual([s.lecturer_id for s in get_top_lecturers(scores, 2)], [4, 3])
        self.assertEqual([s.lecturer_id for s in get_bottom_lecturers(scores, 2)], [1, 2])


class AggregateHelpersTests(SimpleTestCase):
    def test_question_average(self):
        evaluations = [record(1, 4, 1, 1), record(2, 3, 1, 1), record(4, 1, 1, 1)]
        self.assertAlmostEqual(calculate_question_average(evaluations, 'q1_topic'), 7 / 3)
        self.assertAlmostEqual(calculate_question_average(evaluations, 'q2_knowledge'), 8 / 3)

    def test_question_average_empty_is_zero(self):
        self.assertEqual(calculate_question_average([], 'q3_delivery'), 0)

    def test_question_average_rejects_unknown_field(self):
        with self.assertRaises(ValueError):
            calculate_question_average([record(1)], 'q5')

    def test_recommendation_stats_sum_to_total(self):
        for flags in ([], [True], [False, None], [True, True, False, None, True]):
            evaluations = [record(3, recommend_continue=flag) for flag in flags]
            stats = calculate_recommendation_stats(evaluations)
            self.assertEqual(stats['ya'] + stats['tidak'], len(evaluations))
        self.assertEqual(stats, {'ya': 3, 'tidak': 2})

    def test_count_per_lecturer(self):
        evaluations = [record(3, lecturer_id=1), record(3, lecturer_id=2), record(3, lecturer_id=1), record(3)]
        counts = count_evaluations_per_lecturer(evaluations)
        self.assertEqual(counts, {1: 2, 2: 1})
        self.assertEqual(sum(counts.values()), 3)

    def test_filter_evaluations(self):
        evaluations = [
            record(3, id=1, lecturer_id=1, week=1, lecture_type='Subuh', evaluation_date='2025-01-05'),
            record(3, id=2, lecturer_id=2, week=2, lecture_type='Maghrib', evaluation_date='2025-01-12'),
            record(3, id=3, lecturer_id=1, week=2, lecture_type='Maghrib', evaluation_date='2025-02-01'),
        ]
        ids = lambda items: [e.id for e in items]
        self.assertEqual(ids(filter_evaluations(evaluations, lecturer_id=1)), [1, 3])
        self.assertEqual(ids(filter_evaluations(evaluations, week=2, lecture_type='Maghrib')), [2, 3])
        self.assertEqual(ids(filter_evaluations(evaluations, date_from='2025-01-06', date_to='2025-01-31')), [2])
        self.assertEqual(ids(filter_evaluations(evaluations)), [1, 2, 3])
