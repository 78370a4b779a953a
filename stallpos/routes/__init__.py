"""
API Routes
JSON blueprints; handlers delegate to the services built by create_app.
"""

from flask import current_app, request

from stallpos.errors import ValidationError
from stallpos.utils.helpers import parse_limit


def get_services():
    """Services container of the current application"""
    return current_app.extensions['stallpos']


def json_body():
    """Request JSON object, or an empty dict when the body is missing or not an object"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def limit_arg():
    try:
        return parse_limit(request.args.get('limit'))
    except ValueError as e:
        raise ValidationError(f"Invalid limit: {e}") from e


def to_json(records):
    return [record.to_dict() for record in records]
