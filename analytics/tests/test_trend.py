from datetime import date
from unittest import mock

from django.test import SimpleTestCase

from analytics.trend import (
    TrendPoint, calculate_monthly_trend, get_trend_by_lecturer, validate_trend_data,
    get_trend_direction, get_trend_labels, get_trend_values, month_slots,
)
from .factories import record


def point(score, count=1):
    return TrendPoint(month=1, year=2025, label='Jan 2025', average_score=score, evaluation_count=count)


class MonthlyTrendTests(SimpleTestCase):
    today = date(2025, 2, 14)

    def test_empty_input_gives_null_points(self):
        points = calculate_monthly_trend([], 6, today=self.today)
        self.assertEqual(len(points), 6)
        for p in points:
            self.assertIsNone(p.average_score)
            self.assertEqual(p.evaluation_count, 0)
        self.assertTrue(validate_trend_data(points))

    def test_uses_current_date_by_default(self):
        with mock.patch('analytics.trend.local_today', return_value=date(2024, 7, 1)):
            points = calculate_monthly_trend([], 2)
        self.assertEqual([p.label for p in points], ['Jun 2024', 'Jul 2024'])

    def test_year_rollover_and_labels(self):
        points = calculate_monthly_trend([], 6, today=self.today)
        self.assertEqual(
            [(p.year, p.month) for p in points],
            [(2024, 9), (2024, 10), (2024, 11), (2024, 12), (2025, 1), (2025, 2)]
        )
        self.assertEqual(
            get_trend_labels(points),
            ['Sep 2024', 'Okt 2024', 'Nov 2024', 'Dis 2024', 'Jan 2025', 'Feb 2025']
        )
        self.assertEqual(month_slots(14, date(2025, 1, 31))[0], (2023, 12))

    def test_current_month_average_of_record_means(self):
        evaluations = [
            record(4, evaluation_date='2025-02-01'),
            record(2, 2, 1, 3, evaluation_date='2025-02-28'),
            record(1, evaluation_date='2025-01-31'),
        ]
        [current] = calculate_monthly_trend(evaluations, 1, today=self.today)
        self.assertEqual(current.average_score, 3)
        self.assertEqual(current.evaluation_count, 2)

    def test_lecturer_filter_keeps_bucket_count(self):
        evaluations = [
            record(4, lecturer_id=1, evaluation_date='2025-02-01'),
            record(2, lecturer_id=2, evaluation_date='2025-02-03'),
            record(3, lecturer_id=2, evaluation_date='2024-12-03'),
        ]
        everyone = calculate_monthly_trend(evaluations, 4, today=self.today)
        only_two = get_trend_by_lecturer(evaluations, 2, 4, today=self.today)

        self.assertEqual(len(everyone), len(only_two))
        self.assertEqual(get_trend_values(everyone), [None, 3, None, 3])
        self.assertEqual(get_trend_values(only_two), [None, 3, None, 2])
        self.assertTrue(validate_trend_data(only_two))


class TrendValidationTests(SimpleTestCase):
    def test_rejects_zero_instead_of_null(self):
        self.assertFalse(validate_trend_data([point(0, count=0)]))

    def test_rejects_missing_or_out_of_range_average(self):
        self.assertFalse(validate_trend_data([point(None, count=2)]))
        self.assertFalse(validate_trend_data([point(4.5)]))
        self.assertTrue(validate_trend_data([point(1), point(4), point(None, count=0)]))


class TrendDirectionTests(SimpleTestCase):
    def test_insufficient(self):
        self.assertEqual(get_trend_direction([]), 'insufficient')
        self.assertEqual(get_trend_direction([point(3), point(None, 0)]), 'insufficient')

    def test_improving_declining_stable(self):
        self.assertEqual(get_trend_direction([point(2), point(2.5)]), 'improving')
        self.assertEqual(get_trend_direction([point(3), point(2.5)]), 'declining')
        self.assertEqual(get_trend_direction([point(3), point(3.05)]), 'stable')

    def test_odd_count_puts_middle_point_in_second_half(self):
        # first half [2.0], second half [3.0, 1.1]
        points = [point(2.0), point(None, 0), point(3.0), point(1.1)]
        self.assertEqual(get_trend_direction(points), 'stable')
        self.assertEqual(get_trend_direction([point(2.0), point(3.0), point(1.4)]), 'improving')
