"""
Summary Routes
Daily, weekly and monthly totals
"""

from flask import Blueprint, current_app, jsonify

from stallpos.routes import get_services, limit_arg, to_json
from stallpos.services.summaries import validate_date, validate_month

bp = Blueprint('summaries', __name__)


@bp.route('/daily', methods=['GET'])
def list_daily():
    return jsonify(to_json(get_services().summaries.list_daily(limit=limit_arg())))


@bp.route('/daily/<date>', methods=['GET'])
def get_daily(date):
    return jsonify(get_services().summaries.daily(validate_date(date)).to_dict())


@bp.route('/weekly', methods=['GET'])
def list_weekly():
    return jsonify(to_json(get_services().summaries.list_weekly(limit=limit_arg())))


@bp.route('/weekly/<week_start>', methods=['GET'])
def get_weekly(week_start):
    return jsonify(get_services().summaries.weekly(validate_date(week_start)).to_dict())


@bp.route('/monthly', methods=['GET'])
def list_monthly():
    return jsonify(to_json(get_services().summaries.list_monthly(limit=limit_arg())))


@bp.route('/monthly/<month>', methods=['GET'])
def get_monthly(month):
    return jsonify(get_services().summaries.monthly(validate_month(month)).to_dict())


@bp.route('/rebuild', methods=['POST'])
def rebuild():
    """Recompute every summary row from the stored transactions"""
    result = get_services().summaries.rebuild_summaries()
    current_app.logger.info(f"Summaries rebuilt via API: {result}")
    return jsonify({'message': 'Summaries rebuilt successfully', **result})
