"""
Authentication Routes
Till login check
"""

from flask import Blueprint, jsonify

from stallpos.routes import get_services, json_body

bp = Blueprint('auth', __name__)


@bp.route('/login', methods=['POST'])
def login():
    """Check credentials and return the user"""
    user = get_services().catalog.authenticate(json_body())
    return jsonify({'user': user.to_dict()})
