"""
Transaction Routes
Record sales and list them
"""

from flask import Blueprint, jsonify

from stallpos.routes import get_services, json_body, limit_arg, to_json

bp = Blueprint('transactions', __name__)


@bp.route('', methods=['POST'])
def create_transaction():
    """Record a sale and update the daily, weekly and monthly summaries"""
    transaction = get_services().sales.create_transaction(json_body())
    return jsonify(transaction.to_dict())


@bp.route('', methods=['GET'])
def list_transactions():
    """Newest first, optionally ?limit=N"""
    return jsonify(to_json(get_services().sales.list_transactions(limit=limit_arg())))


@bp.route('/date/<date>', methods=['GET'])
def transactions_by_date(date):
    return jsonify(to_json(get_services().sales.transactions_by_date(date)))
