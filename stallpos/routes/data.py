"""
Data Routes
Period clearing and report data for downloads
"""

from flask import Blueprint, jsonify, request

from stallpos.routes import get_services, to_json

bp = Blueprint('data', __name__)


@bp.route('/data/clear', methods=['DELETE'])
def clear_data():
    """Clear ?period=day|week|month for ?date="""
    message, counts = get_services().clearing.clear(
        request.args.get('period'),
        request.args.get('date'),
    )
    return jsonify({'message': message, 'deleted': counts})


def _report(summary, transactions):
    return jsonify({'summary': summary.to_dict(), 'transactions': to_json(transactions)})


@bp.route('/download/daily/<date>', methods=['GET'])
def download_daily(date):
    return _report(*get_services().sales.daily_report(date))


@bp.route('/download/weekly/<week_start>', methods=['GET'])
def download_weekly(week_start):
    return _report(*get_services().sales.weekly_report(week_start))


@bp.route('/download/monthly/<month>', methods=['GET'])
def download_monthly(month):
    return _report(*get_services().sales.monthly_report(month))
