"""
Catalog Service
Login, categories and menu items
"""

import logging
from datetime import datetime
from werkzeug.security import check_password_hash

from stallpos.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from stallpos.schemas import (Category, CategoryIn, CategoryUpdate, LoginIn, MenuItem,
                              MenuItemIn, MenuItemUpdate, parse_payload)
from stallpos.utils.helpers import new_id

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, storage):
        self.storage = storage

    # Users
    def authenticate(self, data):
        """
        Check a username and password

        Returns:
            User: The matching user

        Raises:
            AuthenticationError: Unknown user or wrong password
        """
        credentials = parse_payload(LoginIn, data, "Invalid login data")
        user = self.storage.get_user_by_username(credentials.username)

        if user is None or not check_password_hash(user.password_hash, credentials.password):
            logger.warning(f"Failed login attempt for {credentials.username}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User {user.username} logged in")
        return user

    # Categories
    def list_categories(self):
        return self.storage.list_categories()

    def create_category(self, data):
        payload = parse_payload(CategoryIn, data, "Invalid category data")

        with self.storage.atomic():
            if self.storage.get_category_by_name(payload.name):
                raise ConflictError("Category already exists")
            category = self.storage.create_category(Category(
                id=new_id(),
                name=payload.name,
                sub_categories=payload.sub_categories,
                created_at=datetime.now(),
            ))
        return category

    def update_category(self, category_id, data):
        payload = parse_payload(CategoryUpdate, data, "Invalid category data")
        changes = payload.model_dump(exclude_none=True)

        with self.storage.atomic():
            if 'name' in changes:
                existing = self.storage.get_category_by_name(changes['name'])
                if existing and existing.id != category_id:
                    raise ConflictError("Category already exists")
            category = self.storage.update_category(category_id, changes)

        if category is None:
            raise NotFoundError("Category not found")
        return category

    def delete_category(self, category_id):
        if not self.storage.delete_category(category_id):
            raise NotFoundError("Category not found")

    # Menu items
    def list_menu_items(self):
        return self.storage.list_menu_items()

    def get_menu_item(self, item_id):
        item = self.storage.get_menu_item(item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    def create_menu_item(self, data):
        payload = parse_payload(MenuItemIn, data, "Invalid menu item")
        item = self.storage.create_menu_item(MenuItem(id=new_id(), **payload.model_dump()))
        logger.info(f"Menu item created: {item.name}")
        return item

    def update_menu_item(self, item_id, data):
        payload = parse_payload(MenuItemUpdate, data, "Invalid menu item")
        item = self.storage.update_menu_item(item_id, payload.changes())
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    def delete_menu_item(self, item_id):
        """Historical transactions keep their copy of the item"""
        if not self.storage.delete_menu_items([item_id]):
            raise NotFoundError("Menu item not found")

    def delete_menu_items(self, ids):
        if not isinstance(ids, list) or not ids:
            raise ValidationError("Invalid or empty ids array")
        count = self.storage.delete_menu_items(ids)
        logger.info(f"{count} menu item(s) deleted")
        return count

    def delete_all_menu_items(self):
        count = self.storage.delete_all_menu_items()
        logger.info(f"All {count} menu items deleted")
        return count
