"""
Data Clearing
Deletes a day, week or month of sales and inventory data and takes its
contribution back out of the summaries that enclose it.
"""

import logging
from collections import defaultdict

from stallpos.errors import ValidationError
from stallpos.services.summaries import Totals, apply_totals, validate_date, validate_month
from stallpos.utils.periods import month_bounds, month_key, week_bounds

logger = logging.getLogger(__name__)

PERIODS = ('day', 'week', 'month')


def _sum_dailies(dailies):
    totals = Totals()
    for daily in dailies:
        totals = totals + Totals.of(daily)
    return totals


class DataClearingService:
    """Rollback engine for period deletes"""

    def __init__(self, storage):
        self.storage = storage

    def clear(self, period, date):
        """
        Dispatch a clear request

        Args:
            period: 'day', 'week' or 'month'
            date: Day, week start or month key for the period

        Returns:
            tuple: (message, counts of removed rows)
        """
        if period not in PERIODS or not date:
            raise ValidationError("Invalid parameters. Required: period (day/week/month) and date")

        if period == 'day':
            return f"Cleared data for {date}", self.clear_by_day(date)
        if period == 'week':
            return f"Cleared weekly data starting {date}", self.clear_by_week(date)
        return f"Cleared monthly data for {date}", self.clear_by_month(date)

    def _subtract_weekly(self, week_start, totals):
        weekly = self.storage.get_weekly_summary(week_start)
        if weekly:
            self.storage.update_weekly_summary(apply_totals(weekly, totals, sign=-1))

    def _subtract_monthly(self, month, totals):
        monthly = self.storage.get_monthly_summary(month)
        if monthly:
            self.storage.update_monthly_summary(apply_totals(monthly, totals, sign=-1))

    def clear_by_day(self, date):
        """
        Remove one day and subtract its daily row from its week and month

        Weekly and monthly rows may go negative if they had drifted; they are
        not clamped.
        """
        validate_date(date)
        storage = self.storage

        with storage.atomic():
            snapshot = storage.get_daily_summary(date)

            counts = {
                'transactions': storage.delete_transactions_between(date, date),
                'inventorySessions': storage.delete_inventory_between(date, date),
            }

            if snapshot:
                totals = Totals.of(snapshot)
                self._subtract_weekly(week_bounds(date)[0], totals)
                self._subtract_monthly(month_key(date), totals)

            counts['dailySummaries'] = storage.delete_daily_summary(date)

        logger.info(f"Cleared day {date}: {counts}")
        return counts

    def clear_by_week(self, week_start):
        """
        Remove a Monday-to-Sunday week and subtract it from its month

        A date that is not a Monday clears the week containing it. When the
        week straddles two months each month loses only the days that fall
        inside it.
        """
        validate_date(week_start)
        start, end = week_bounds(week_start)
        storage = self.storage

        with storage.atomic():
            snapshot = storage.get_weekly_summary(start)
            dailies = storage.list_daily_summaries(start=start, end=end)

            counts = {
                'transactions': storage.delete_transactions_between(start, end),
                'inventorySessions': storage.delete_inventory_between(start, end),
            }

            if snapshot:
                if month_key(start) == month_key(end):
                    self._subtract_monthly(month_key(start), Totals.of(snapshot))
                else:
                    by_month = defaultdict(list)
                    for daily in dailies:
                        by_month[month_key(daily.date)].append(daily)
                    for month, rows in by_month.items():
                        self._subtract_monthly(month, _sum_dailies(rows))

            counts['dailySummaries'] = storage.delete_daily_summaries_between(start, end)
            counts['weeklySummaries'] = storage.delete_weekly_summary(start)

        logger.info(f"Cleared week {start}..{end}: {counts}")
        return counts

    def clear_by_month(self, month):
        """
        Remove a calendar month with its daily, weekly and monthly rows

        Nothing is subtracted upward. The week that began in the previous
        month loses the cleared days; a week that starts inside the month is
        removed whole, including any days it covers in the next month.
        """
        month = validate_month(month)
        start, end = month_bounds(month)
        storage = self.storage

        with storage.atomic():
            dailies = storage.list_daily_summaries(start=start, end=end)

            leading_week, leading_end = week_bounds(dailies[-1].date) if dailies else (None, None)
            if leading_week is not None and leading_week < start:
                self._subtract_weekly(leading_week, _sum_dailies(
                    d for d in dailies if d.date <= leading_end
                ))

            counts = {
                'transactions': storage.delete_transactions_between(start, end),
                'inventorySessions': storage.delete_inventory_between(start, end),
                'dailySummaries': storage.delete_daily_summaries_between(start, end),
                'weeklySummaries': storage.delete_weekly_summaries_between(start, end),
                'monthlySummaries': storage.delete_monthly_summary(month),
            }

        logger.info(f"Cleared month {month}: {counts}")
        return counts
