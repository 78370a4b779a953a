"""
Database Storage
Flask-SQLAlchemy backend. Must be used inside an application context.

Writes outside an atomic() block commit immediately; inside one they are
flushed and committed (or rolled back) when the outermost block exits.
"""

import logging
import threading
from contextlib import contextmanager

from stallpos import models, schemas
from stallpos.models import db
from stallpos.storage.base import Storage

logger = logging.getLogger(__name__)


def _columns(row):
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def _to_record(record_cls, row):
    if row is None:
        return None
    return record_cls.model_validate(_columns(row))


def _transaction_record(row):
    if row is None:
        return None
    data = _columns(row)
    data['payment'] = schemas.payment_from_fields(
        data.pop('payment_method'),
        split_payment=data.pop('split_payment'),
        creditor=data.pop('creditor'),
    )
    return schemas.Transaction.model_validate(data)


class DatabaseStorage(Storage):
    """Storage backed by the SQLAlchemy session"""

    name = 'database'

    def __init__(self):
        self._local = threading.local()

    @property
    def _depth(self):
        return getattr(self._local, 'depth', 0)

    @_depth.setter
    def _depth(self, value):
        self._local.depth = value

    @contextmanager
    def atomic(self):
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                db.session.commit()
        except Exception:
            if self._depth == 1:
                db.session.rollback()
                logger.warning("Database unit of work rolled back")
            raise
        finally:
            self._depth -= 1

    def _save(self, row):
        db.session.add(row)
        self._commit()
        return row

    def _commit(self):
        if self._depth == 0:
            try:
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
        else:
            db.session.flush()

    def _update(self, model, key, changes):
        row = db.session.get(model, key)
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        self._commit()
        return row

    def _delete(self, query):
        count = query.delete(synchronize_session='fetch')
        self._commit()
        return count

    # Users
    def get_user(self, user_id):
        return _to_record(schemas.User, db.session.get(models.User, user_id))

    def get_user_by_username(self, username):
        return _to_record(schemas.User, models.User.query.filter_by(username=username).first())

    def create_user(self, user):
        self._save(models.User(**user.model_dump()))
        return user

    # Categories
    def list_categories(self):
        rows = models.Category.query.order_by(models.Category.created_at).all()
        return [_to_record(schemas.Category, row) for row in rows]

    def get_category(self, category_id):
        return _to_record(schemas.Category, db.session.get(models.Category, category_id))

    def get_category_by_name(self, name):
        return _to_record(schemas.Category, models.Category.query.filter_by(name=name).first())

    def create_category(self, category):
        self._save(models.Category(**category.model_dump()))
        return category

    def update_category(self, category_id, changes):
        return _to_record(schemas.Category, self._update(models.Category, category_id, changes))

    def delete_category(self, category_id):
        return self._delete(models.Category.query.filter_by(id=category_id)) > 0

    # Menu items
    def list_menu_items(self):
        return [_to_record(schemas.MenuItem, row) for row in models.MenuItem.query.all()]

    def get_menu_item(self, item_id):
        return _to_record(schemas.MenuItem, db.session.get(models.MenuItem, item_id))

    def create_menu_item(self, item):
        self._save(models.MenuItem(**item.model_dump()))
        return item

    def update_menu_item(self, item_id, changes):
        return _to_record(schemas.MenuItem, self._update(models.MenuItem, item_id, changes))

    def delete_menu_items(self, item_ids):
        ids = list(item_ids)
        if not ids:
            return 0
        return self._delete(models.MenuItem.query.filter(models.MenuItem.id.in_(ids)))

    def delete_all_menu_items(self):
        return self._delete(models.MenuItem.query)

    # Transactions
    def create_transaction(self, transaction):
        payment = transaction.payment
        row = models.Transaction(
            id=transaction.id,
            items=[item.model_dump() for item in transaction.items],
            total_amount=transaction.total_amount,
            payment_method=payment.method,
            biller_name=transaction.biller_name,
            split_payment=schemas.payment_details(payment) if payment.method == 'split' else None,
            creditor=schemas.payment_details(payment) if payment.method == 'creditor' else None,
            extras=[extra.model_dump() for extra in transaction.extras] if transaction.extras else None,
            created_at=transaction.created_at,
            date=transaction.date,
            day_name=transaction.day_name,
            time=transaction.time,
        )
        self._save(row)
        return transaction

    def get_transaction(self, transaction_id):
        return _transaction_record(db.session.get(models.Transaction, transaction_id))

    def list_transactions(self, limit=None):
        query = models.Transaction.query.order_by(models.Transaction.created_at.desc())
        if limit:
            query = query.limit(limit)
        return [_transaction_record(row) for row in query.all()]

    def get_transactions_by_date_range(self, start, end):
        rows = models.Transaction.query.filter(
            models.Transaction.date >= start,
            models.Transaction.date <= end
        ).order_by(models.Transaction.created_at.desc()).all()
        return [_transaction_record(row) for row in rows]

    def delete_transactions_between(self, start, end):
        return self._delete(models.Transaction.query.filter(
            models.Transaction.date >= start,
            models.Transaction.date <= end
        ))

    # Summaries
    def _replace_summary(self, row, summary):
        if row is None:
            return None
        row.total_amount = summary.total_amount
        row.gpay_amount = summary.gpay_amount
        row.cash_amount = summary.cash_amount
        row.order_count = summary.order_count
        self._commit()
        return summary

    def get_daily_summary(self, date):
        row = models.DailySummary.query.filter_by(date=date).first()
        return _to_record(schemas.DailySummary, row)

    def list_daily_summaries(self, limit=None, start=None, end=None):
        query = models.DailySummary.query
        if start is not None:
            query = query.filter(models.DailySummary.date >= start)
        if end is not None:
            query = query.filter(models.DailySummary.date <= end)
        query = query.order_by(models.DailySummary.date.desc())
        if limit:
            query = query.limit(limit)
        return [_to_record(schemas.DailySummary, row) for row in query.all()]

    def create_daily_summary(self, summary):
        self._save(models.DailySummary(**summary.model_dump()))
        return summary

    def update_daily_summary(self, summary):
        row = models.DailySummary.query.filter_by(date=summary.date).first()
        return self._replace_summary(row, summary)

    def delete_daily_summaries_between(self, start, end):
        return self._delete(models.DailySummary.query.filter(
            models.DailySummary.date >= start,
            models.DailySummary.date <= end
        ))

    def get_weekly_summary(self, week_start):
        row = models.WeeklySummary.query.filter_by(week_start=week_start).first()
        return _to_record(schemas.WeeklySummary, row)

    def list_weekly_summaries(self, limit=None):
        query = models.WeeklySummary.query.order_by(models.WeeklySummary.week_start.desc())
        if limit:
            query = query.limit(limit)
        return [_to_record(schemas.WeeklySummary, row) for row in query.all()]

    def create_weekly_summary(self, summary):
        self._save(models.WeeklySummary(**summary.model_dump()))
        return summary

    def update_weekly_summary(self, summary):
        row = models.WeeklySummary.query.filter_by(week_start=summary.week_start).first()
        return self._replace_summary(row, summary)

    def delete_weekly_summaries_between(self, start, end):
        return self._delete(models.WeeklySummary.query.filter(
            models.WeeklySummary.week_start >= start,
            models.WeeklySummary.week_start <= end
        ))

    def get_monthly_summary(self, month):
        row = models.MonthlySummary.query.filter_by(month=month).first()
        return _to_record(schemas.MonthlySummary, row)

    def list_monthly_summaries(self, limit=None):
        query = models.MonthlySummary.query.order_by(models.MonthlySummary.month.desc())
        if limit:
            query = query.limit(limit)
        return [_to_record(schemas.MonthlySummary, row) for row in query.all()]

    def create_monthly_summary(self, summary):
        self._save(models.MonthlySummary(**summary.model_dump()))
        return summary

    def update_monthly_summary(self, summary):
        row = models.MonthlySummary.query.filter_by(month=summary.month).first()
        return self._replace_summary(row, summary)

    def delete_monthly_summaries_between(self, start, end):
        return self._delete(models.MonthlySummary.query.filter(
            models.MonthlySummary.month >= start,
            models.MonthlySummary.month <= end
        ))

    # Inventory
    def create_inventory_session(self, session):
        self._save(models.InventorySession(**session.model_dump()))
        return session

    def get_inventory_session(self, session_id):
        return _to_record(schemas.InventorySession, db.session.get(models.InventorySession, session_id))

    def get_inventory_session_by_date(self, date):
        row = models.InventorySession.query.filter_by(date=date).first()
        return _to_record(schemas.InventorySession, row)

    def list_inventory_sessions(self):
        rows = models.InventorySession.query.order_by(models.InventorySession.start_time.desc()).all()
        return [_to_record(schemas.InventorySession, row) for row in rows]

    def update_inventory_session(self, session_id, changes):
        row = self._update(models.InventorySession, session_id, changes)
        return _to_record(schemas.InventorySession, row)

    def create_inventory_item(self, item):
        self._save(models.InventoryItem(**item.model_dump()))
        return item

    def get_inventory_item(self, item_id):
        return _to_record(schemas.InventoryItem, db.session.get(models.InventoryItem, item_id))

    def get_inventory_items_by_session(self, session_id):
        rows = models.InventoryItem.query.filter_by(session_id=session_id) \
            .order_by(models.InventoryItem.created_at).all()
        return [_to_record(schemas.InventoryItem, row) for row in rows]

    def update_inventory_item(self, item_id, changes):
        return _to_record(schemas.InventoryItem, self._update(models.InventoryItem, item_id, changes))

    def delete_inventory_between(self, start, end):
        session_ids = [row.id for row in models.InventorySession.query.filter(
            models.InventorySession.date >= start,
            models.InventorySession.date <= end
        ).all()]
        if not session_ids:
            return 0
        models.InventoryItem.query.filter(
            models.InventoryItem.session_id.in_(session_ids)
        ).delete(synchronize_session='fetch')
        return self._delete(models.InventorySession.query.filter(
            models.InventorySession.id.in_(session_ids)
        ))
