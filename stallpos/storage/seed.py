"""
Default Data
Users, categories and menu items created on first start
"""

import logging
from datetime import datetime
from werkzeug.security import generate_password_hash

from stallpos.schemas import Category, MenuItem, User
from stallpos.utils.helpers import new_id

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ['Tea', 'Coffee', 'Snacks', 'Beverages']

# (name, description, price in paise, category)
DEFAULT_MENU = [
    ('Masala Chai', 'Traditional spiced tea', 2500, 'Tea'),
    ('Green Tea', 'Healthy herbal tea', 3000, 'Tea'),
    ('Cappuccino', 'Rich coffee with foam', 8000, 'Coffee'),
    ('Black Coffee', 'Strong black coffee', 5000, 'Coffee'),
    ('Samosa', 'Crispy fried snack', 2000, 'Snacks'),
    ('Veg Sandwich', 'Fresh vegetable sandwich', 6000, 'Snacks'),
    ('Orange Juice', 'Fresh squeezed orange', 4000, 'Beverages'),
    ('Mango Lassi', 'Sweet yogurt drink', 4500, 'Beverages'),
]


def seed_default_data(storage, admin_password, staff_password):
    """
    Create default users, categories and menu items that are missing

    Users and categories are matched by name. Menu items are only created
    when the menu is empty, so deleted items are not brought back.

    Returns:
        dict: Number of records created per kind
    """
    created = {'users': 0, 'categories': 0, 'menu_items': 0}

    with storage.atomic():
        for username, password in (('admin', admin_password), ('Chai-fi', staff_password)):
            if storage.get_user_by_username(username) is None:
                storage.create_user(User(
                    id=new_id(),
                    username=username,
                    password_hash=generate_password_hash(password),
                ))
                created['users'] += 1

        for name in DEFAULT_CATEGORIES:
            if storage.get_category_by_name(name) is None:
                storage.create_category(Category(
                    id=new_id(), name=name, sub_categories=[], created_at=datetime.now()
                ))
                created['categories'] += 1

        if not storage.list_menu_items():
            for name, description, price, category in DEFAULT_MENU:
                storage.create_menu_item(MenuItem(
                    id=new_id(),
                    name=name,
                    description=description,
                    price=price,
                    category=category,
                    available=True,
                ))
                created['menu_items'] += 1

    logger.info(f"Default data seeded: {created}")
    return created
