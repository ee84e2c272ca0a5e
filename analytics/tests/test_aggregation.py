from datetime import date, timedelta

from django.test import SimpleTestCase

from analytics.aggregation import (
    RequestFigure,
    daily_trends,
    orders_by_status,
    period_granularity,
    period_key,
    revenue_by_period,
    summarize,
)


def figure(day, status="sent", total=10000):
    return RequestFigure(day=day, status=status, total_paise=total)


class PeriodTests(SimpleTestCase):
    def test_granularity_thresholds(self):
        start = date(2024, 1, 1)
        self.assertEqual(period_granularity(start, start + timedelta(days=60)), "daily")
        self.assertEqual(period_granularity(start, start + timedelta(days=61)), "weekly")
        self.assertEqual(period_granularity(start, start + timedelta(days=180)), "weekly")
        self.assertEqual(period_granularity(start, start + timedelta(days=181)), "monthly")

    def test_week_starts_on_sunday(self):
        self.assertEqual(period_key(date(2024, 10, 2), "weekly"), "Week of 2024-09-29")
        self.assertEqual(period_key(date(2024, 9, 29), "weekly"), "Week of 2024-09-29")
        self.assertEqual(period_key(date(2024, 10, 5), "weekly"), "Week of 2024-09-29")

    def test_daily_and_monthly_keys(self):
        self.assertEqual(period_key(date(2024, 10, 2), "daily"), "2024-10-02")
        self.assertEqual(period_key(date(2024, 10, 2), "monthly"), "2024-10")

    def test_revenue_by_period_sorted(self):
        figures = [
            figure(date(2024, 10, 3), total=500),
            figure(date(2024, 10, 1), total=100),
            figure(date(2024, 10, 3), total=200),
        ]
        rows = revenue_by_period(figures, date(2024, 10, 1), date(2024, 10, 31))
        self.assertEqual(
            rows,
            [
                {"period": "2024-10-01", "revenue": 100, "orders": 1},
                {"period": "2024-10-03", "revenue": 700, "orders": 2},
            ],
        )


class DailyTrendsTests(SimpleTestCase):
    def test_zero_filled(self):
        rows = daily_trends([figure(date(2024, 10, 2), total=300)], date(2024, 10, 1), date(2024, 10, 3))
        self.assertEqual(
            rows,
            [
                {"date": "2024-10-01", "orders": 0, "revenue": 0},
                {"date": "2024-10-02", "orders": 1, "revenue": 300},
                {"date": "2024-10-03", "orders": 0, "revenue": 0},
            ],
        )

    def test_capped_to_last_90_days(self):
        rows = daily_trends([figure(date(2024, 1, 5))], date(2024, 1, 1), date(2024, 12, 31))
        self.assertEqual(len(rows), 90)
        self.assertEqual(rows[0]["date"], "2024-10-03")
        self.assertEqual(rows[-1]["date"], "2024-12-31")
        self.assertEqual(sum(r["orders"] for r in rows), 0)


class SummaryTests(SimpleTestCase):
    def test_summary_figures(self):
        day = date(2024, 10, 1)
        figures = [
            figure(day, "confirmed", 30000),
            figure(day, "sent", 10000),
            figure(day, "sent", 5000),
        ]
        self.assertEqual(
            summarize(figures),
            {
                "totalRevenue": 45000,
                "totalOrders": 3,
                "averageOrderValue": 15000,
                "confirmationRate": 33.33,
            },
        )
        self.assertEqual(
            orders_by_status(figures),
            [
                {"status": "sent", "count": 2, "percentage": 66.67},
                {"status": "confirmed", "count": 1, "percentage": 33.33},
            ],
        )

    def test_empty_range(self):
        self.assertEqual(
            summarize([]),
            {"totalRevenue": 0, "totalOrders": 0, "averageOrderValue": 0, "confirmationRate": 0.0},
        )
        self.assertEqual(orders_by_status([]), [])
