"""
Inventory Session Service
One stock-taking session per calendar day: stock in at start of day,
stock out worked out from the day's sales at end of day.

Session states: pre-billing (client side only) -> billing -> ended.
"""

import logging
from collections import Counter
from datetime import datetime

from stallpos.errors import ConflictError, NotFoundError
from stallpos.schemas import (SESSION_BILLING, SESSION_ENDED, InventoryItem,
                              InventoryItemWithMenu, InventorySession, SessionTimeIn,
                              StartDayIn, StockInUpdate, parse_payload)
from stallpos.services.summaries import validate_date
from stallpos.utils.helpers import new_id
from stallpos.utils.periods import format_date

logger = logging.getLogger(__name__)


class InventorySessionService:
    """Inventory session state machine"""

    def __init__(self, storage, clock=None):
        self.storage = storage
        self.clock = clock or datetime.now

    def today(self):
        return format_date(self.clock())

    def current_session(self):
        """Today's session, whatever its status"""
        session = self.storage.get_inventory_session_by_date(self.today())
        if session is None:
            raise NotFoundError("No active session for today")
        return session

    def list_sessions(self):
        return self.storage.list_inventory_sessions()

    def start_day(self, items):
        """
        Open today's session with the given stock-in counts

        Args:
            items: List of {menuItemId, stockIn}

        Returns:
            InventorySession: The new session in billing status

        Raises:
            ConflictError: If a session already exists for today
        """
        payload = parse_payload(StartDayIn, {'items': items}, "Invalid inventory data")
        today = self.today()
        now = self.clock()

        with self.storage.atomic():
            if self.storage.get_inventory_session_by_date(today):
                raise ConflictError("Inventory session already exists for today")

            session = self.storage.create_inventory_session(InventorySession(
                id=new_id(),
                date=today,
                status=SESSION_BILLING,
                start_time=now,
                created_at=now,
            ))

            for entry in payload.items:
                self.storage.create_inventory_item(InventoryItem(
                    id=new_id(),
                    session_id=session.id,
                    menu_item_id=entry.menu_item_id,
                    stock_in=entry.stock_in,
                    stock_out=0,
                    stock_left=entry.stock_in,
                    created_at=now,
                ))

        logger.info(f"Inventory day {today} started with {len(payload.items)} items")
        return session

    def calculate_stock_out(self, session_id, date):
        """
        Set stock out from the quantities sold on a date

        Every line of every transaction that date counts toward its menu item.
        Stock left is stock in minus stock out and may go negative.

        Returns:
            list: Updated inventory items
        """
        sold = Counter()
        for transaction in self.storage.get_transactions_by_date(date):
            for line in transaction.items:
                sold[line.id] += line.quantity

        updated = []
        with self.storage.atomic():
            for item in self.storage.get_inventory_items_by_session(session_id):
                stock_out = sold[item.menu_item_id]
                updated.append(self.storage.update_inventory_item(item.id, {
                    'stock_out': stock_out,
                    'stock_left': item.stock_in - stock_out,
                }))
        return updated

    def end_day(self, session_id=None):
        """
        Close today's session

        The status check and the close run in one unit of work, so of two
        concurrent calls only one ends the session.

        Raises:
            NotFoundError: If there is no session today, or session_id names another session
            ConflictError: If today's session has already ended
        """
        with self.storage.atomic():
            session = self.storage.get_inventory_session_by_date(self.today())
            if session is None or (session_id and session.id != session_id):
                raise NotFoundError("No active session found")
            if session.status == SESSION_ENDED:
                raise ConflictError("Session already ended")

            self.calculate_stock_out(session.id, session.date)
            session = self.storage.update_inventory_session(session.id, {
                'status': SESSION_ENDED,
                'end_time': self.clock(),
            })

        logger.info(f"Inventory day {session.date} ended")
        return session

    def update_stock_in(self, item_id, stock_in):
        """
        Correct the stock in of an item in today's open session

        Stock left is recomputed against the stock out already recorded.
        """
        payload = parse_payload(StockInUpdate, {'stockIn': stock_in}, "Invalid stock in")

        with self.storage.atomic():
            session = self.storage.get_inventory_session_by_date(self.today())
            if session is None:
                raise NotFoundError("No active session found")
            if session.status == SESSION_ENDED:
                raise ConflictError("Cannot edit stock of an ended session")

            item = self.storage.get_inventory_item(item_id)
            if item is None or item.session_id != session.id:
                raise NotFoundError("Inventory item not found")

            return self.storage.update_inventory_item(item.id, {
                'stock_in': payload.stock_in,
                'stock_left': payload.stock_in - item.stock_out,
            })

    def update_session_time(self, data):
        """Adjust the recorded start and/or end time of a session"""
        payload = parse_payload(SessionTimeIn, data, "Invalid session time")

        changes = {}
        if payload.start_time is not None:
            changes['start_time'] = payload.start_time
        if payload.end_time is not None:
            changes['end_time'] = payload.end_time

        session = self.storage.update_inventory_session(payload.session_id, changes)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def items_with_menu(self, session_id):
        """Session items joined with their menu item; items of deleted menu items are left out"""
        result = []
        for item in self.storage.get_inventory_items_by_session(session_id):
            menu_item = self.storage.get_menu_item(item.menu_item_id)
            if menu_item:
                result.append(InventoryItemWithMenu(**dict(item), menu_item=menu_item))
        return result

    def clear_inventory_by_date(self, date):
        """Delete the session for a date and its items"""
        validate_date(date)
        with self.storage.atomic():
            removed = self.storage.delete_inventory_between(date, date)
        logger.info(f"Inventory for {date} deleted ({removed} sessions)")
        return removed
