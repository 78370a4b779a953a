"""
Unit Tests for Inventory Sessions

Day lifecycle (start, sell, end), stock-in corrections and session queries,
against both storage backends with a fixed clock.
"""

import pytest
import threading
import time
from datetime import datetime

from stallpos.errors import ConflictError, NotFoundError, ValidationError
from stallpos.services.inventory import InventorySessionService
from stallpos.storage import MemoryStorage
from conftest import FixedClock


def line(item_id, quantity, price='10.00'):
    return {'id': item_id, 'name': item_id.title(), 'price': price, 'quantity': quantity}


def by_menu_item(items):
    return {item.menu_item_id: item for item in items}


class TestStartDay:
    """Test opening the day."""

    def test_start_creates_billing_session(self, services, clock):
        session = services.inventory.start_day([
            {'menuItemId': 'tea', 'stockIn': 10},
            {'menuItemId': 'samosa', 'stockIn': 5},
        ])

        assert session.date == '2024-03-04'
        assert session.status == 'billing'
        assert session.start_time == clock()
        assert session.end_time is None

        items = by_menu_item(services.storage.get_inventory_items_by_session(session.id))
        assert (items['tea'].stock_in, items['tea'].stock_out, items['tea'].stock_left) == (10, 0, 10)
        assert items['samosa'].stock_left == 5

    def test_second_start_same_day_conflicts(self, services):
        services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])

        with pytest.raises(ConflictError):
            services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 3}])

    def test_unknown_menu_item_accepted(self, services):
        session = services.inventory.start_day([{'menuItemId': 'not-on-menu', 'stockIn': 1}])
        assert len(services.storage.get_inventory_items_by_session(session.id)) == 1

    @pytest.mark.parametrize('items', [
        [{'menuItemId': 'tea', 'stockIn': -1}],
        [{'menuItemId': 'tea', 'stockIn': 'many'}],
        [{'stockIn': 1}],
        None,
    ])
    def test_invalid_items_rejected_without_writes(self, services, items):
        with pytest.raises(ValidationError):
            services.inventory.start_day(items)
        assert services.storage.get_inventory_session_by_date('2024-03-04') is None

    def test_new_day_allows_new_session(self, services, clock):
        services.inventory.start_day([])
        clock.advance(days=1)

        session = services.inventory.start_day([])

        assert session.date == '2024-03-05'
        assert len(services.inventory.list_sessions()) == 2
        assert services.inventory.list_sessions()[0].date == '2024-03-05'


class TestEndDay:
    """Test closing the day and computing stock out."""

    def test_lifecycle(self, services, record_sale, clock):
        """Test stock in 10 and 5 with sales of 3 and 1 leaves 7 and 4."""
        session = services.inventory.start_day([
            {'menuItemId': 'tea', 'stockIn': 10},
            {'menuItemId': 'samosa', 'stockIn': 5},
        ])
        record_sale(items=[line('tea', 2), line('samosa', 1)], total='30.00')
        record_sale(items=[line('tea', 1)], total='10.00')
        record_sale(date='2024-03-05', items=[line('tea', 4)], total='40.00')

        clock.advance(hours=9)
        ended = services.inventory.end_day(session.id)

        assert ended.status == 'ended'
        assert ended.end_time == datetime(2024, 3, 4, 19, 30)

        items = by_menu_item(services.storage.get_inventory_items_by_session(session.id))
        assert (items['tea'].stock_out, items['tea'].stock_left) == (3, 7)
        assert (items['samosa'].stock_out, items['samosa'].stock_left) == (1, 4)

    def test_stock_left_may_go_negative(self, services, record_sale):
        services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 1}])
        record_sale(items=[line('tea', 3)], total='30.00')

        session = services.inventory.end_day()

        item = services.storage.get_inventory_items_by_session(session.id)[0]
        assert (item.stock_out, item.stock_left) == (3, -2)

    def test_repeated_lines_are_all_counted(self, services, record_sale):
        services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])
        record_sale(items=[line('tea', 1), line('tea', 2)], total='30.00')

        session = services.inventory.end_day()

        assert services.storage.get_inventory_items_by_session(session.id)[0].stock_out == 3

    def test_end_without_session_not_found(self, services):
        with pytest.raises(NotFoundError):
            services.inventory.end_day()

    def test_end_other_session_not_found(self, services):
        services.inventory.start_day([])
        with pytest.raises(NotFoundError):
            services.inventory.end_day('some-other-session')

    def test_end_twice_conflicts(self, services):
        services.inventory.start_day([])
        services.inventory.end_day()

        with pytest.raises(ConflictError):
            services.inventory.end_day()


class TestUpdateStockIn:
    """Test live stock-in corrections."""

    def test_stock_left_recomputed_with_recorded_stock_out(self, services, record_sale):
        session = services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])
        item = services.storage.get_inventory_items_by_session(session.id)[0]
        services.inventory.calculate_stock_out(session.id, session.date)
        record_sale(items=[line('tea', 4)], total='40.00')
        services.inventory.calculate_stock_out(session.id, session.date)

        updated = services.inventory.update_stock_in(item.id, 12)

        assert (updated.stock_in, updated.stock_out, updated.stock_left) == (12, 4, 8)

    def test_ended_session_conflicts(self, services):
        session = services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])
        item = services.storage.get_inventory_items_by_session(session.id)[0]
        services.inventory.end_day()

        with pytest.raises(ConflictError):
            services.inventory.update_stock_in(item.id, 5)

    def test_no_session_today_not_found(self, services, clock):
        session = services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])
        item = services.storage.get_inventory_items_by_session(session.id)[0]
        clock.advance(days=1)

        with pytest.raises(NotFoundError):
            services.inventory.update_stock_in(item.id, 5)

    def test_unknown_item_not_found(self, services):
        services.inventory.start_day([])
        with pytest.raises(NotFoundError):
            services.inventory.update_stock_in('missing', 5)

    def test_negative_stock_rejected(self, services):
        with pytest.raises(ValidationError):
            services.inventory.update_stock_in('any', -1)


class TestSessionQueries:
    """Test session reads, time edits and deletion."""

    def test_current_session(self, services):
        with pytest.raises(NotFoundError):
            services.inventory.current_session()

        started = services.inventory.start_day([])
        assert services.inventory.current_session().id == started.id

    def test_items_with_menu_skip_deleted_menu_items(self, services):
        tea = services.catalog.create_menu_item({'name': 'Tea', 'price': '10.00'})
        cake = services.catalog.create_menu_item({'name': 'Cake', 'price': '40.00'})
        session = services.inventory.start_day([
            {'menuItemId': tea.id, 'stockIn': 10},
            {'menuItemId': cake.id, 'stockIn': 2},
        ])
        services.catalog.delete_menu_item(cake.id)

        items = services.inventory.items_with_menu(session.id)

        assert len(items) == 1
        data = items[0].to_dict()
        assert data['menuItemId'] == tea.id
        assert data['menuItem']['name'] == 'Tea'
        assert data['menuItem']['price'] == '10.00'

    def test_update_session_time(self, services):
        session = services.inventory.start_day([])

        updated = services.inventory.update_session_time({
            'sessionId': session.id,
            'startTime': '2024-03-04T08:00:00',
        })

        assert updated.start_time == datetime(2024, 3, 4, 8, 0)
        assert updated.end_time is None

    def test_update_time_of_unknown_session(self, services):
        with pytest.raises(NotFoundError):
            services.inventory.update_session_time({
                'sessionId': 'missing', 'endTime': '2024-03-04T20:00:00'
            })

    def test_clear_inventory_by_date(self, services):
        session = services.inventory.start_day([{'menuItemId': 'tea', 'stockIn': 10}])

        assert services.inventory.clear_inventory_by_date('2024-03-04') == 1

        assert services.storage.get_inventory_session(session.id) is None
        assert services.storage.get_inventory_items_by_session(session.id) == []


class TestConcurrentSessionEdits:
    """Test session edits racing an end of day on the in-memory backend."""

    @pytest.fixture
    def slow_service(self, monkeypatch):
        storage = MemoryStorage()
        service = InventorySessionService(storage, clock=FixedClock())
        service.start_day([{'menuItemId': 'tea', 'stockIn': 10}])
        lookup = storage.get_transactions_by_date

        def slow_lookup(date):
            time.sleep(0.2)
            return lookup(date)

        monkeypatch.setattr(storage, 'get_transactions_by_date', slow_lookup)
        return service

    def run_together(self, *calls):
        outcomes = []

        def attempt(call):
            try:
                call()
                outcomes.append('done')
            except ConflictError:
                outcomes.append('conflict')

        threads = [threading.Thread(target=attempt, args=(call,)) for call in calls]
        for thread in threads:
            thread.start()
            time.sleep(0.05)
        for thread in threads:
            thread.join(5)
        return outcomes

    def test_only_one_of_two_end_days_closes_the_session(self, slow_service):
        outcomes = self.run_together(slow_service.end_day, slow_service.end_day)

        assert sorted(outcomes) == ['conflict', 'done']
        assert slow_service.current_session().status == 'ended'

    def test_stock_edit_behind_end_day_is_rejected(self, slow_service):
        item = slow_service.storage.get_inventory_items_by_session(
            slow_service.current_session().id)[0]

        outcomes = self.run_together(slow_service.end_day,
                                     lambda: slow_service.update_stock_in(item.id, 50))

        assert sorted(outcomes) == ['conflict', 'done']
        assert slow_service.storage.get_inventory_item(item.id).stock_in == 10
