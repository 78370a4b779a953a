"""
Sales Service
Records transactions, lists them, and builds the report data for the
daily / weekly / monthly downloads and the menu item sales table.
"""

import calendar
import logging
from collections import Counter
from datetime import datetime

from stallpos.schemas import LineItem, Extra, Transaction, TransactionIn, parse_payload
from stallpos.services.summaries import validate_date, validate_month
from stallpos.utils.helpers import new_id
from stallpos.utils.money import format_paise
from stallpos.utils.periods import month_bounds

logger = logging.getLogger(__name__)

TIME_FORMAT = '%I:%M %p'


class SalesService:
    """Transactions and sales reports"""

    def __init__(self, storage, aggregator, clock=None, default_biller='Sriram'):
        self.storage = storage
        self.aggregator = aggregator
        self.clock = clock or datetime.now
        self.default_biller = default_biller

    def create_transaction(self, data):
        """
        Validate and store a sale, then fold it into the summaries

        The transaction and its three summary updates are one unit of work.

        Args:
            data: JSON body (camelCase keys, rupee amounts)

        Returns:
            Transaction: Stored record
        """
        payload = parse_payload(TransactionIn, data, "Invalid transaction data")
        now = self.clock()

        transaction = Transaction(
            id=new_id(),
            items=[LineItem(**item.model_dump()) for item in payload.items],
            total_amount=payload.total_amount,
            payment=payload.payment(),
            biller_name=payload.biller_name or self.default_biller,
            extras=[Extra(**extra.model_dump()) for extra in payload.extras] if payload.extras else None,
            created_at=now,
            date=payload.date,
            day_name=payload.day_name,
            time=payload.time or now.strftime(TIME_FORMAT),
        )

        with self.storage.atomic():
            self.storage.create_transaction(transaction)
            self.aggregator.record_transaction(transaction)

        logger.info(f"Transaction {transaction.id} recorded: {format_paise(transaction.total_amount)} "
                    f"({transaction.payment_method}) on {transaction.date}")
        return transaction

    def list_transactions(self, limit=None):
        return self.storage.list_transactions(limit=limit)

    def transactions_by_date(self, date):
        return self.storage.get_transactions_by_date(validate_date(date))

    def menu_item_sales(self, date=None, month=None):
        """
        Units sold and revenue per menu item

        Uses a single day when date is given, otherwise a calendar month
        (the current month by default). Revenue is units sold times the
        item's current price.

        Returns:
            list: Dicts sorted by units sold, highest first
        """
        if date:
            start = end = validate_date(date)
        else:
            month = validate_month(month) if month else self.clock().strftime('%Y-%m')
            year, number = int(month[:4]), int(month[5:])
            start = f"{month}-01"
            end = f"{month}-{calendar.monthrange(year, number)[1]:02d}"

        sold = Counter()
        for transaction in self.storage.get_transactions_by_date_range(start, end):
            for line in transaction.items:
                sold[line.id] += line.quantity

        sales = []
        for item in self.storage.list_menu_items():
            total_sold = sold[item.id]
            sales.append({
                'id': item.id,
                'name': item.name,
                'category': item.category,
                'price': format_paise(item.price),
                'totalSold': total_sold,
                'revenue': format_paise(total_sold * item.price),
            })

        sales.sort(key=lambda row: row['totalSold'], reverse=True)
        return sales

    # Report data for the download endpoints
    def daily_report(self, date):
        summary = self.aggregator.daily(validate_date(date))
        return summary, self.storage.get_transactions_by_date(date)

    def weekly_report(self, week_start):
        summary = self.aggregator.weekly(validate_date(week_start))
        return summary, self.storage.get_transactions_by_date_range(summary.week_start, summary.week_end)

    def monthly_report(self, month):
        month = validate_month(month)
        summary = self.aggregator.monthly(month)
        start, end = month_bounds(month)
        return summary, self.storage.get_transactions_by_date_range(start, end)
