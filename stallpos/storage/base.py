"""
Storage Interface
The repository contract consumed by the services. Both backends implement it.

Records going in and out are the frozen pydantic records from stallpos.schemas.
Create methods store the record as given (ids are assigned by the caller);
update methods take a dict of field changes and return the new record, or None
for an unknown id. Range methods take inclusive 'YYYY-MM-DD' (or 'YYYY-MM') bounds.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager


class Storage(ABC):
    """Abstract storage backend"""

    name = 'abstract'

    @contextmanager
    def atomic(self):
        """
        Unit of work: every write inside the block lands together or not at all

        Blocks may nest; only the outermost one commits.
        """
        yield self

    # Users
    @abstractmethod
    def get_user(self, user_id):
        pass

    @abstractmethod
    def get_user_by_username(self, username):
        pass

    @abstractmethod
    def create_user(self, user):
        pass

    # Categories
    @abstractmethod
    def list_categories(self):
        pass

    @abstractmethod
    def get_category(self, category_id):
        pass

    @abstractmethod
    def get_category_by_name(self, name):
        pass

    @abstractmethod
    def create_category(self, category):
        pass

    @abstractmethod
    def update_category(self, category_id, changes):
        pass

    @abstractmethod
    def delete_category(self, category_id):
        """Returns True when a row was removed"""

    # Menu items
    @abstractmethod
    def list_menu_items(self):
        pass

    @abstractmethod
    def get_menu_item(self, item_id):
        pass

    @abstractmethod
    def create_menu_item(self, item):
        pass

    @abstractmethod
    def update_menu_item(self, item_id, changes):
        pass

    @abstractmethod
    def delete_menu_items(self, item_ids):
        """Returns the number of rows removed"""

    @abstractmethod
    def delete_all_menu_items(self):
        """Returns the number of rows removed"""

    # Transactions
    @abstractmethod
    def create_transaction(self, transaction):
        pass

    @abstractmethod
    def get_transaction(self, transaction_id):
        pass

    @abstractmethod
    def list_transactions(self, limit=None):
        """Newest first"""

    @abstractmethod
    def get_transactions_by_date_range(self, start, end):
        """Newest first"""

    def get_transactions_by_date(self, date):
        return self.get_transactions_by_date_range(date, date)

    @abstractmethod
    def delete_transactions_between(self, start, end):
        """Returns the number of rows removed"""

    # Daily summaries (keyed by date)
    @abstractmethod
    def get_daily_summary(self, date):
        pass

    @abstractmethod
    def list_daily_summaries(self, limit=None, start=None, end=None):
        """Newest date first, optionally restricted to [start, end]"""

    @abstractmethod
    def create_daily_summary(self, summary):
        pass

    @abstractmethod
    def update_daily_summary(self, summary):
        """Replace the row with the same date"""

    @abstractmethod
    def delete_daily_summaries_between(self, start, end):
        pass

    # Weekly summaries (keyed by week_start)
    @abstractmethod
    def get_weekly_summary(self, week_start):
        pass

    @abstractmethod
    def list_weekly_summaries(self, limit=None):
        """Newest week first"""

    @abstractmethod
    def create_weekly_summary(self, summary):
        pass

    @abstractmethod
    def update_weekly_summary(self, summary):
        """Replace the row with the same week_start"""

    @abstractmethod
    def delete_weekly_summaries_between(self, start, end):
        """Remove rows whose week_start falls in [start, end]"""

    # Monthly summaries (keyed by month)
    @abstractmethod
    def get_monthly_summary(self, month):
        pass

    @abstractmethod
    def list_monthly_summaries(self, limit=None):
        """Newest month first"""

    @abstractmethod
    def create_monthly_summary(self, summary):
        pass

    @abstractmethod
    def update_monthly_summary(self, summary):
        """Replace the row with the same month"""

    @abstractmethod
    def delete_monthly_summaries_between(self, start, end):
        """Remove rows whose month falls in [start, end]"""

    def delete_daily_summary(self, date):
        return self.delete_daily_summaries_between(date, date)

    def delete_weekly_summary(self, week_start):
        return self.delete_weekly_summaries_between(week_start, week_start)

    def delete_monthly_summary(self, month):
        return self.delete_monthly_summaries_between(month, month)

    # Inventory
    @abstractmethod
    def create_inventory_session(self, session):
        pass

    @abstractmethod
    def get_inventory_session(self, session_id):
        pass

    @abstractmethod
    def get_inventory_session_by_date(self, date):
        pass

    @abstractmethod
    def list_inventory_sessions(self):
        """Latest start time first"""

    @abstractmethod
    def update_inventory_session(self, session_id, changes):
        pass

    @abstractmethod
    def create_inventory_item(self, item):
        """A session holds at most one item per menu item; a duplicate is rejected"""

    @abstractmethod
    def get_inventory_item(self, item_id):
        pass

    @abstractmethod
    def get_inventory_items_by_session(self, session_id):
        """In creation order"""

    @abstractmethod
    def update_inventory_item(self, item_id, changes):
        pass

    @abstractmethod
    def delete_inventory_between(self, start, end):
        """Remove sessions dated in [start, end] with their items; returns sessions removed"""
