"""
API Tests for Sales, Summaries, Clearing and Report Downloads

Uses the Flask test client against a fresh in-memory application.
"""

import pytest

from conftest import sale


def post_sale(client, **kwargs):
    response = client.post('/api/transactions', json=sale(**kwargs))
    assert response.status_code == 200, response.get_json()
    return response.get_json()


class TestTransactionRoutes:
    """Test recording and listing sales."""

    def test_create_transaction(self, client):
        data = post_sale(client, total='50.00')

        assert data['totalAmount'] == '50.00'
        assert data['paymentMethod'] == 'cash'
        assert data['billerName'] == 'Sriram'
        assert data['dayName'] == 'Monday'
        assert data['time'] == '10:30 AM'
        assert data['splitPayment'] is None
        assert data['extras'] is None
        assert data['id']

    def test_create_with_extras_and_biller(self, client):
        data = post_sale(client, billerName='Anu', extras=[{'name': 'Parcel', 'amount': '5'}])

        assert data['billerName'] == 'Anu'
        assert data['extras'] == [{'name': 'Parcel', 'amount': '5.00'}]

    def test_invalid_transaction_rejected(self, client):
        response = client.post('/api/transactions', json={'totalAmount': '10.00'})

        assert response.status_code == 400
        assert response.get_json()['error'].startswith('Invalid transaction data')
        assert client.get('/api/transactions').get_json() == []
        assert client.get('/api/summaries/daily').get_json() == []

    def test_missing_body_rejected(self, client):
        response = client.post('/api/transactions')
        assert response.status_code == 400

    def test_list_with_limit(self, client, clock):
        post_sale(client, total='1.00')
        clock.advance(minutes=5)
        post_sale(client, total='2.00')

        data = client.get('/api/transactions?limit=1').get_json()

        assert [t['totalAmount'] for t in data] == ['2.00']

    def test_bad_limit_rejected(self, client):
        assert client.get('/api/transactions?limit=zero').status_code == 400

    def test_transactions_by_date(self, client):
        post_sale(client, date='2024-03-04')
        post_sale(client, date='2024-03-05')

        data = client.get('/api/transactions/date/2024-03-05').get_json()

        assert [t['date'] for t in data] == ['2024-03-05']


class TestSummaryRoutes:
    """Test summary endpoints."""

    def test_daily_summary_after_cash_sale(self, client):
        post_sale(client, date='2024-03-04', total='50.00', method='cash')

        data = client.get('/api/summaries/daily/2024-03-04').get_json()

        assert data['date'] == '2024-03-04'
        assert data['totalAmount'] == '50.00'
        assert data['gpayAmount'] == '0.00'
        assert data['cashAmount'] == '50.00'
        assert data['orderCount'] == 1

    def test_weekly_and_monthly(self, client):
        post_sale(client, date='2024-03-06', total='20.00', method='gpay')

        weekly = client.get('/api/summaries/weekly/2024-03-04').get_json()
        assert (weekly['weekStart'], weekly['weekEnd']) == ('2024-03-04', '2024-03-10')
        assert weekly['gpayAmount'] == '20.00'

        monthly = client.get('/api/summaries/monthly/2024-03').get_json()
        assert monthly['month'] == '2024-03'
        assert monthly['totalAmount'] == '20.00'

        assert len(client.get('/api/summaries/weekly').get_json()) == 1
        assert len(client.get('/api/summaries/monthly?limit=5').get_json()) == 1

    @pytest.mark.parametrize('path', [
        '/api/summaries/daily/2024-03-04',
        '/api/summaries/weekly/2024-03-04',
        '/api/summaries/monthly/2024-03',
    ])
    def test_missing_summary_404(self, client, path):
        response = client.get(path)
        assert response.status_code == 404
        assert 'not found' in response.get_json()['error']

    def test_rebuild(self, client):
        post_sale(client, total='50.00')

        response = client.post('/api/summaries/rebuild')

        assert response.status_code == 200
        data = response.get_json()
        assert data['transactions'] == 1
        assert data['daily'] == 1
        assert client.get('/api/summaries/daily/2024-03-04').get_json()['totalAmount'] == '50.00'


class TestClearRoutes:
    """Test the clear-data endpoint."""

    def test_clear_day(self, client):
        post_sale(client, date='2024-03-04', total='50.00')
        post_sale(client, date='2024-03-05', total='20.00')

        response = client.delete('/api/data/clear?period=day&date=2024-03-04')

        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'Cleared data for 2024-03-04'
        assert data['deleted']['transactions'] == 1
        assert client.get('/api/summaries/daily/2024-03-04').status_code == 404
        weekly = client.get('/api/summaries/weekly/2024-03-04').get_json()
        assert (weekly['totalAmount'], weekly['orderCount']) == ('20.00', 1)

    def test_clear_week_and_month(self, client):
        post_sale(client, date='2024-03-04')

        assert client.delete('/api/data/clear?period=week&date=2024-03-04').status_code == 200
        assert client.delete('/api/data/clear?period=month&date=2024-03').status_code == 200
        assert client.get('/api/summaries/monthly/2024-03').status_code == 404

    @pytest.mark.parametrize('query', ['', '?period=day', '?period=year&date=2024', '?date=2024-03-04'])
    def test_bad_parameters(self, client, query):
        response = client.delete(f'/api/data/clear{query}')
        assert response.status_code == 400
        assert 'Invalid parameters' in response.get_json()['error']

    def test_bad_date(self, client):
        response = client.delete('/api/data/clear?period=day&date=yesterday')
        assert response.status_code == 400


class TestDownloadRoutes:
    """Test report data endpoints."""

    def test_daily_report(self, client):
        post_sale(client, date='2024-03-04', total='50.00')

        data = client.get('/api/download/daily/2024-03-04').get_json()

        assert data['summary']['totalAmount'] == '50.00'
        assert len(data['transactions']) == 1

    def test_weekly_report_covers_week(self, client):
        post_sale(client, date='2024-03-04')
        post_sale(client, date='2024-03-10')
        post_sale(client, date='2024-03-11')

        data = client.get('/api/download/weekly/2024-03-04').get_json()

        assert sorted(t['date'] for t in data['transactions']) == ['2024-03-04', '2024-03-10']

    def test_monthly_report(self, client):
        post_sale(client, date='2024-02-29')
        post_sale(client, date='2024-03-01')

        data = client.get('/api/download/monthly/2024-02').get_json()

        assert data['summary']['month'] == '2024-02'
        assert [t['date'] for t in data['transactions']] == ['2024-02-29']

    @pytest.mark.parametrize('path', [
        '/api/download/daily/2024-03-04',
        '/api/download/weekly/2024-03-04',
        '/api/download/monthly/2024-03',
    ])
    def test_report_without_summary_404(self, client, path):
        assert client.get(path).status_code == 404


class TestAppRoutes:
    """Test application-level endpoints and error handling."""

    def test_health(self, client):
        data = client.get('/health').get_json()
        assert data['status'] == 'ok'
        assert data['storage'] == 'memory'

    def test_unknown_route_json_404(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert 'error' in response.get_json()

    def test_unexpected_error_returns_500(self, fresh_app, client, monkeypatch):
        services = fresh_app.extensions['stallpos']

        def explode(limit=None):
            raise RuntimeError('storage offline')

        monkeypatch.setattr(services.sales, 'list_transactions', explode)

        response = client.get('/api/transactions')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Internal server error'}


class TestDatabaseBackendRoutes:
    """Test a sale end to end on the database backend."""

    @pytest.fixture
    def db_client(self, app_factory, clock):
        app = app_factory(clock=clock, STORAGE_BACKEND='database')
        return app.test_client()

    def test_sale_clear_and_rebuild(self, db_client):
        post_sale(db_client, date='2024-03-04', total='50.00')
        post_sale(db_client, date='2024-03-05', total='20.00', method='gpay')

        assert db_client.get('/health').get_json()['storage'] == 'database'
        weekly = db_client.get('/api/summaries/weekly/2024-03-04').get_json()
        assert (weekly['totalAmount'], weekly['gpayAmount'], weekly['orderCount']) == ('70.00', '20.00', 2)

        assert db_client.delete('/api/data/clear?period=day&date=2024-03-04').status_code == 200
        assert db_client.post('/api/summaries/rebuild').status_code == 200

        monthly = db_client.get('/api/summaries/monthly/2024-03').get_json()
        assert (monthly['totalAmount'], monthly['cashAmount'], monthly['orderCount']) == ('20.00', '0.00', 1)
