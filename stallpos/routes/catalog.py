"""
Catalog Routes
Categories and menu items
"""

from flask import Blueprint, jsonify, request

from stallpos.routes import get_services, json_body, to_json

bp = Blueprint('catalog', __name__)


# Categories
@bp.route('/categories', methods=['GET'])
def list_categories():
    return jsonify(to_json(get_services().catalog.list_categories()))


@bp.route('/categories', methods=['POST'])
def create_category():
    category = get_services().catalog.create_category(json_body())
    return jsonify(category.to_dict())


@bp.route('/categories/<category_id>', methods=['PUT'])
def update_category(category_id):
    category = get_services().catalog.update_category(category_id, json_body())
    return jsonify(category.to_dict())


@bp.route('/categories/<category_id>', methods=['DELETE'])
def delete_category(category_id):
    get_services().catalog.delete_category(category_id)
    return jsonify({'message': 'Category deleted successfully'})


# Menu items
@bp.route('/menu', methods=['GET'])
def list_menu_items():
    return jsonify(to_json(get_services().catalog.list_menu_items()))


@bp.route('/menu', methods=['POST'])
def create_menu_item():
    item = get_services().catalog.create_menu_item(json_body())
    return jsonify(item.to_dict())


@bp.route('/menu', methods=['DELETE'])
def delete_all_menu_items():
    count = get_services().catalog.delete_all_menu_items()
    return jsonify({
        'message': f'All {count} menu items deleted successfully',
        'deletedCount': count
    })


@bp.route('/menu/sales', methods=['GET'])
def menu_item_sales():
    """Units sold and revenue per item for ?date= or ?month= (current month by default)"""
    sales = get_services().sales.menu_item_sales(
        date=request.args.get('date'),
        month=request.args.get('month'),
    )
    return jsonify(sales)


@bp.route('/menu/bulk-delete', methods=['POST'])
def bulk_delete_menu_items():
    count = get_services().catalog.delete_menu_items(json_body().get('ids'))
    return jsonify({
        'message': f'{count} menu item(s) deleted successfully',
        'deletedCount': count
    })


@bp.route('/menu/<item_id>', methods=['GET'])
def get_menu_item(item_id):
    return jsonify(get_services().catalog.get_menu_item(item_id).to_dict())


@bp.route('/menu/<item_id>', methods=['PUT'])
def update_menu_item(item_id):
    item = get_services().catalog.update_menu_item(item_id, json_body())
    return jsonify(item.to_dict())


@bp.route('/menu/<item_id>', methods=['DELETE'])
def delete_menu_item(item_id):
    get_services().catalog.delete_menu_item(item_id)
    return jsonify({'message': 'Menu item deleted successfully'})
