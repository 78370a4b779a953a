"""
Summary Aggregator
Folds each new transaction into the daily, weekly and monthly summary rows,
and rebuilds all three levels from the transaction log on demand.
"""

import logging
from datetime import datetime
from typing import NamedTuple

from stallpos.errors import NotFoundError, ValidationError
from stallpos.schemas import DailySummary, MonthlySummary, WeeklySummary
from stallpos.utils.helpers import new_id
from stallpos.utils.periods import month_key, normalize_month, parse_date, week_bounds

logger = logging.getLogger(__name__)

# Lexical bounds that cover every date / month key
FIRST_KEY = '0000-00-00'
LAST_KEY = '9999-99-99'


class Totals(NamedTuple):
    """Amounts (paise) and order count contributed to a summary row"""
    total: int = 0
    gpay: int = 0
    cash: int = 0
    orders: int = 0

    @classmethod
    def of(cls, summary):
        return cls(summary.total_amount, summary.gpay_amount, summary.cash_amount,
                   summary.order_count)

    def __add__(self, other):
        return Totals(self.total + other.total, self.gpay + other.gpay,
                      self.cash + other.cash, self.orders + other.orders)


def payment_split(transaction):
    """
    Amounts collected through gpay and cash for one transaction

    gpay and cash take the whole total; split uses the amounts supplied with
    the sale as-is; creditor sales collect nothing.

    Returns:
        tuple: (gpay_paise, cash_paise)
    """
    payment = transaction.payment
    if payment.method == 'gpay':
        return transaction.total_amount, 0
    if payment.method == 'cash':
        return 0, transaction.total_amount
    if payment.method == 'split':
        return payment.gpay_amount, payment.cash_amount
    return 0, 0


def transaction_totals(transaction):
    gpay, cash = payment_split(transaction)
    return Totals(transaction.total_amount, gpay, cash, 1)


def apply_totals(summary, totals, sign=1):
    """Return a copy of a summary row with totals added (sign=1) or subtracted (sign=-1)"""
    return summary.model_copy(update={
        'total_amount': summary.total_amount + sign * totals.total,
        'gpay_amount': summary.gpay_amount + sign * totals.gpay,
        'cash_amount': summary.cash_amount + sign * totals.cash,
        'order_count': summary.order_count + sign * totals.orders,
    })


def _seeded(totals):
    return {
        'id': new_id(),
        'total_amount': totals.total,
        'gpay_amount': totals.gpay,
        'cash_amount': totals.cash,
        'order_count': totals.orders,
        'created_at': datetime.now(),
    }


class SummaryAggregator:
    """Keeps the three summary levels in step with the transaction log"""

    def __init__(self, storage):
        self.storage = storage

    def record_transaction(self, transaction):
        """
        Add one transaction to its day, week and month rows

        The three rows are written in a single unit of work.
        """
        totals = transaction_totals(transaction)
        with self.storage.atomic():
            self._fold(transaction.date, totals)
        logger.debug(f"Summaries updated for {transaction.date} (+{totals.total} paise)")

    def _fold(self, date, totals):
        storage = self.storage

        daily = storage.get_daily_summary(date)
        if daily:
            storage.update_daily_summary(apply_totals(daily, totals))
        else:
            storage.create_daily_summary(DailySummary(date=date, **_seeded(totals)))

        start, end = week_bounds(date)
        weekly = storage.get_weekly_summary(start)
        if weekly:
            storage.update_weekly_summary(apply_totals(weekly, totals))
        else:
            storage.create_weekly_summary(
                WeeklySummary(week_start=start, week_end=end, **_seeded(totals))
            )

        month = month_key(date)
        monthly = storage.get_monthly_summary(month)
        if monthly:
            storage.update_monthly_summary(apply_totals(monthly, totals))
        else:
            storage.create_monthly_summary(MonthlySummary(month=month, **_seeded(totals)))

    def rebuild_summaries(self):
        """
        Recompute every summary row from the transaction log

        Returns:
            dict: Transactions folded and rows written per level
        """
        with self.storage.atomic():
            self.storage.delete_daily_summaries_between(FIRST_KEY, LAST_KEY)
            self.storage.delete_weekly_summaries_between(FIRST_KEY, LAST_KEY)
            self.storage.delete_monthly_summaries_between(FIRST_KEY, LAST_KEY)

            by_date = {}
            transactions = self.storage.list_transactions()
            for transaction in transactions:
                by_date[transaction.date] = by_date.get(transaction.date, Totals()) \
                    + transaction_totals(transaction)

            for date in sorted(by_date):
                self._fold(date, by_date[date])

        result = {
            'transactions': len(transactions),
            'daily': len(self.storage.list_daily_summaries()),
            'weekly': len(self.storage.list_weekly_summaries()),
            'monthly': len(self.storage.list_monthly_summaries()),
        }
        logger.info(f"Summaries rebuilt from transaction log: {result}")
        return result

    # Reads
    def daily(self, date):
        summary = self.storage.get_daily_summary(date)
        if summary is None:
            raise NotFoundError("Daily summary not found")
        return summary

    def weekly(self, week_start):
        summary = self.storage.get_weekly_summary(week_start)
        if summary is None:
            raise NotFoundError("Weekly summary not found")
        return summary

    def monthly(self, month):
        summary = self.storage.get_monthly_summary(month)
        if summary is None:
            raise NotFoundError("Monthly summary not found")
        return summary

    def list_daily(self, limit=None):
        return self.storage.list_daily_summaries(limit=limit)

    def list_weekly(self, limit=None):
        return self.storage.list_weekly_summaries(limit=limit)

    def list_monthly(self, limit=None):
        return self.storage.list_monthly_summaries(limit=limit)


def validate_date(value):
    """Check a 'YYYY-MM-DD' string, raising the API ValidationError"""
    try:
        parse_date(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return value


def validate_month(value):
    """Accept 'YYYY-MM' or a date, returning 'YYYY-MM'"""
    try:
        return normalize_month(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
