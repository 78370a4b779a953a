"""
Inventory Routes
Start and end of day stock taking
"""

from flask import Blueprint, jsonify

from stallpos.routes import get_services, json_body, to_json

bp = Blueprint('inventory', __name__)


@bp.route('/session/current', methods=['GET'])
def current_session():
    """Today's session, 404 when the day has not been started"""
    return jsonify(get_services().inventory.current_session().to_dict())


@bp.route('/sessions', methods=['GET'])
def list_sessions():
    return jsonify(to_json(get_services().inventory.list_sessions()))


@bp.route('/items/<session_id>', methods=['GET'])
def session_items(session_id):
    return jsonify(to_json(get_services().inventory.items_with_menu(session_id)))


@bp.route('/start', methods=['POST'])
def start_day():
    session = get_services().inventory.start_day(json_body().get('items'))
    return jsonify({'session': session.to_dict(), 'message': 'Inventory day started successfully'})


@bp.route('/end', methods=['POST'])
def end_day():
    session = get_services().inventory.end_day(json_body().get('sessionId'))
    return jsonify({'session': session.to_dict(), 'message': 'Inventory day ended successfully'})


@bp.route('/session/update-time', methods=['POST'])
def update_session_time():
    session = get_services().inventory.update_session_time(json_body())
    return jsonify({'session': session.to_dict(), 'message': 'Session time updated successfully'})


@bp.route('/item/<item_id>', methods=['PATCH'])
def update_item(item_id):
    """Live stock-in correction while billing"""
    item = get_services().inventory.update_stock_in(item_id, json_body().get('stockIn'))
    return jsonify({'item': item.to_dict(), 'message': 'Inventory item updated successfully'})


@bp.route('/delete/<date>', methods=['DELETE'])
def delete_inventory(date):
    removed = get_services().inventory.clear_inventory_by_date(date)
    return jsonify({'message': 'Inventory data deleted successfully', 'deletedSessions': removed})
