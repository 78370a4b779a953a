"""
Database Models
SQLAlchemy ORM models backing the database storage backend.
Amount columns hold integer paise; nested transaction fields are JSON documents.
"""

from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class User(db.Model):
    """Till login"""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    def __repr__(self):
        return f'<User {self.username}>'


class Category(db.Model):
    """Menu category, referenced by name from menu items"""
    __tablename__ = 'categories'

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False, index=True)
    sub_categories = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    def __repr__(self):
        return f'<Category {self.name}>'


class MenuItem(db.Model):
    """Sellable item"""
    __tablename__ = 'menu_items'

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    price = db.Column(db.Integer, nullable=False, default=0)  # paise
    category = db.Column(db.String(128), nullable=False, default='')
    sub_category = db.Column(db.String(128))
    image = db.Column(db.Text, nullable=False, default='')
    available = db.Column(db.Boolean, nullable=False, default=True)

    def __repr__(self):
        return f'<MenuItem {self.name}>'


class Transaction(db.Model):
    """Completed sale; never updated, only deleted by period"""
    __tablename__ = 'transactions'

    id = db.Column(db.String(36), primary_key=True)
    items = db.Column(db.JSON, nullable=False)  # [{id, name, price, quantity}]
    total_amount = db.Column(db.Integer, nullable=False)  # paise
    payment_method = db.Column(db.String(16), nullable=False)  # gpay, cash, split, creditor
    biller_name = db.Column(db.String(128), nullable=False)
    split_payment = db.Column(db.JSON)  # {gpay_amount, cash_amount}
    extras = db.Column(db.JSON)  # [{name, amount}]
    creditor = db.Column(db.JSON)  # {name, total_amount, paid_amount, balance_amount}
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False, index=True)
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    day_name = db.Column(db.String(16), nullable=False)
    time = db.Column(db.String(16), nullable=False)

    def __repr__(self):
        return f'<Transaction {self.id} {self.date}>'


class DailySummary(db.Model):
    __tablename__ = 'daily_summaries'

    id = db.Column(db.String(36), primary_key=True)
    date = db.Column(db.String(10), unique=True, nullable=False, index=True)
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    gpay_amount = db.Column(db.Integer, nullable=False, default=0)
    cash_amount = db.Column(db.Integer, nullable=False, default=0)
    order_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


class WeeklySummary(db.Model):
    __tablename__ = 'weekly_summaries'

    id = db.Column(db.String(36), primary_key=True)
    week_start = db.Column(db.String(10), unique=True, nullable=False, index=True)  # Monday
    week_end = db.Column(db.String(10), nullable=False)  # Sunday
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    gpay_amount = db.Column(db.Integer, nullable=False, default=0)
    cash_amount = db.Column(db.Integer, nullable=False, default=0)
    order_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


class MonthlySummary(db.Model):
    __tablename__ = 'monthly_summaries'

    id = db.Column(db.String(36), primary_key=True)
    month = db.Column(db.String(7), unique=True, nullable=False, index=True)  # YYYY-MM
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    gpay_amount = db.Column(db.Integer, nullable=False, default=0)
    cash_amount = db.Column(db.Integer, nullable=False, default=0)
    order_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


class InventorySession(db.Model):
    """One stock-taking day"""
    __tablename__ = 'inventory_sessions'

    id = db.Column(db.String(36), primary_key=True)
    date = db.Column(db.String(10), unique=True, nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False)  # pre-billing, billing, ended
    start_time = db.Column(db.DateTime, nullable=False, default=datetime.now)
    end_time = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    # Relationships
    items = db.relationship('InventoryItem', backref='session', lazy='dynamic',
                            cascade='all, delete-orphan')

    def __repr__(self):
        return f'<InventorySession {self.date} {self.status}>'


class InventoryItem(db.Model):
    """Stock counts for one menu item within a session"""
    __tablename__ = 'inventory_items'

    id = db.Column(db.String(36), primary_key=True)
    session_id = db.Column(db.String(36), db.ForeignKey('inventory_sessions.id'),
                           nullable=False, index=True)
    # No foreign key: deleting a menu item keeps its inventory history
    menu_item_id = db.Column(db.String(36), nullable=False)
    stock_in = db.Column(db.Integer, nullable=False)
    stock_out = db.Column(db.Integer, nullable=False, default=0)
    stock_left = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('session_id', 'menu_item_id', name='uq_inventory_item_session_menu'),
    )
