"""
In-Memory Storage
Map-based backend used for development, tests and as the fallback when the
database cannot be reached at startup.
"""

import logging
import threading
from contextlib import contextmanager

from stallpos.storage.base import Storage
from stallpos.utils.helpers import take

logger = logging.getLogger(__name__)

TABLES = (
    'users', 'categories', 'menu_items', 'transactions',
    'daily_summaries', 'weekly_summaries', 'monthly_summaries',
    'inventory_sessions', 'inventory_items',
)


class MemoryStorage(Storage):
    """
    Stores frozen records in dicts

    Summary tables are keyed by their natural key (date, week_start, month);
    everything else by id. Every write and every unit of work holds one
    re-entrant lock. A failed unit of work restores the tables, in place, as
    they were when it began.
    """

    name = 'memory'

    def __init__(self):
        self._tables = {table: {} for table in TABLES}
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def atomic(self):
        with self._lock:
            snapshot = None
            if self._depth == 0:
                snapshot = {name: dict(rows) for name, rows in self._tables.items()}
            self._depth += 1
            try:
                yield self
            except Exception:
                if snapshot is not None:
                    self._restore(snapshot)
                    logger.warning("Memory storage unit of work rolled back")
                raise
            finally:
                self._depth -= 1

    def _restore(self, snapshot):
        for name, saved in snapshot.items():
            rows = self._tables[name]
            rows.clear()
            rows.update(saved)

    def _rows(self, table):
        return self._tables[table]

    def _values(self, table):
        with self._lock:
            return list(self._tables[table].values())

    def _insert(self, table, key, record):
        with self._lock:
            self._tables[table][key] = record
        return record

    def _update(self, table, key, changes):
        with self._lock:
            rows = self._rows(table)
            existing = rows.get(key)
            if existing is None:
                return None
            updated = existing.model_copy(update=changes)
            rows[key] = updated
            return updated

    def _delete_where(self, table, predicate):
        with self._lock:
            rows = self._rows(table)
            doomed = [key for key, row in rows.items() if predicate(row)]
            for key in doomed:
                del rows[key]
        return len(doomed)

    # Users
    def get_user(self, user_id):
        return self._rows('users').get(user_id)

    def get_user_by_username(self, username):
        return next((u for u in self._values('users') if u.username == username), None)

    def create_user(self, user):
        with self._lock:
            if self.get_user_by_username(user.username):
                raise ValueError(f'Username {user.username} already exists')
            return self._insert('users', user.id, user)

    # Categories
    def list_categories(self):
        return self._values('categories')

    def get_category(self, category_id):
        return self._rows('categories').get(category_id)

    def get_category_by_name(self, name):
        return next((c for c in self._values('categories') if c.name == name), None)

    def create_category(self, category):
        with self._lock:
            if self.get_category_by_name(category.name):
                raise ValueError(f'Category {category.name} already exists')
            return self._insert('categories', category.id, category)

    def update_category(self, category_id, changes):
        return self._update('categories', category_id, changes)

    def delete_category(self, category_id):
        return self._delete_where('categories', lambda c: c.id == category_id) > 0

    # Menu items
    def list_menu_items(self):
        return self._values('menu_items')

    def get_menu_item(self, item_id):
        return self._rows('menu_items').get(item_id)

    def create_menu_item(self, item):
        return self._insert('menu_items', item.id, item)

    def update_menu_item(self, item_id, changes):
        return self._update('menu_items', item_id, changes)

    def delete_menu_items(self, item_ids):
        ids = set(item_ids)
        return self._delete_where('menu_items', lambda item: item.id in ids)

    def delete_all_menu_items(self):
        return self._delete_where('menu_items', lambda item: True)

    # Transactions
    def create_transaction(self, transaction):
        return self._insert('transactions', transaction.id, transaction)

    def get_transaction(self, transaction_id):
        return self._rows('transactions').get(transaction_id)

    def list_transactions(self, limit=None):
        rows = sorted(self._values('transactions'), key=lambda t: t.created_at, reverse=True)
        return take(rows, limit)

    def get_transactions_by_date_range(self, start, end):
        rows = [t for t in self._values('transactions') if start <= t.date <= end]
        return sorted(rows, key=lambda t: t.created_at, reverse=True)

    def delete_transactions_between(self, start, end):
        return self._delete_where('transactions', lambda t: start <= t.date <= end)

    # Daily summaries
    def get_daily_summary(self, date):
        return self._rows('daily_summaries').get(date)

    def list_daily_summaries(self, limit=None, start=None, end=None):
        rows = [s for s in self._values('daily_summaries')
                if (start is None or s.date >= start) and (end is None or s.date <= end)]
        return take(sorted(rows, key=lambda s: s.date, reverse=True), limit)

    def create_daily_summary(self, summary):
        with self._lock:
            if summary.date in self._rows('daily_summaries'):
                raise ValueError(f'Daily summary for {summary.date} already exists')
            return self._insert('daily_summaries', summary.date, summary)

    def update_daily_summary(self, summary):
        return self._insert('daily_summaries', summary.date, summary)

    def delete_daily_summaries_between(self, start, end):
        return self._delete_where('daily_summaries', lambda s: start <= s.date <= end)

    # Weekly summaries
    def get_weekly_summary(self, week_start):
        return self._rows('weekly_summaries').get(week_start)

    def list_weekly_summaries(self, limit=None):
        rows = sorted(self._values('weekly_summaries'), key=lambda s: s.week_start, reverse=True)
        return take(rows, limit)

    def create_weekly_summary(self, summary):
        with self._lock:
            if summary.week_start in self._rows('weekly_summaries'):
                raise ValueError(f'Weekly summary for {summary.week_start} already exists')
            return self._insert('weekly_summaries', summary.week_start, summary)

    def update_weekly_summary(self, summary):
        return self._insert('weekly_summaries', summary.week_start, summary)

    def delete_weekly_summaries_between(self, start, end):
        return self._delete_where('weekly_summaries', lambda s: start <= s.week_start <= end)

    # Monthly summaries
    def get_monthly_summary(self, month):
        return self._rows('monthly_summaries').get(month)

    def list_monthly_summaries(self, limit=None):
        rows = sorted(self._values('monthly_summaries'), key=lambda s: s.month, reverse=True)
        return take(rows, limit)

    def create_monthly_summary(self, summary):
        with self._lock:
            if summary.month in self._rows('monthly_summaries'):
                raise ValueError(f'Monthly summary for {summary.month} already exists')
            return self._insert('monthly_summaries', summary.month, summary)

    def update_monthly_summary(self, summary):
        return self._insert('monthly_summaries', summary.month, summary)

    def delete_monthly_summaries_between(self, start, end):
        return self._delete_where('monthly_summaries', lambda s: start <= s.month <= end)

    # Inventory
    def create_inventory_session(self, session):
        with self._lock:
            if self.get_inventory_session_by_date(session.date):
                raise ValueError(f'Inventory session for {session.date} already exists')
            return self._insert('inventory_sessions', session.id, session)

    def get_inventory_session(self, session_id):
        return self._rows('inventory_sessions').get(session_id)

    def get_inventory_session_by_date(self, date):
        return next((s for s in self._values('inventory_sessions') if s.date == date), None)

    def list_inventory_sessions(self):
        return sorted(self._values('inventory_sessions'), key=lambda s: s.start_time, reverse=True)

    def update_inventory_session(self, session_id, changes):
        return self._update('inventory_sessions', session_id, changes)

    def create_inventory_item(self, item):
        with self._lock:
            if any(i.menu_item_id == item.menu_item_id
                   for i in self.get_inventory_items_by_session(item.session_id)):
                raise ValueError(f'Menu item {item.menu_item_id} already in session {item.session_id}')
            return self._insert('inventory_items', item.id, item)

    def get_inventory_item(self, item_id):
        return self._rows('inventory_items').get(item_id)

    def get_inventory_items_by_session(self, session_id):
        return [i for i in self._values('inventory_items') if i.session_id == session_id]

    def update_inventory_item(self, item_id, changes):
        return self._update('inventory_items', item_id, changes)

    def delete_inventory_between(self, start, end):
        with self._lock:
            session_ids = {s.id for s in self._values('inventory_sessions')
                           if start <= s.date <= end}
            self._delete_where('inventory_items', lambda i: i.session_id in session_ids)
            return self._delete_where('inventory_sessions', lambda s: s.id in session_ids)
