"""
Product category data access functions.
"""

from database import get_db
from utils.exceptions import ValidationError
from utils.messages import MESSAGES
from utils.validators import sanitize_input


def get_all_categories() -> list:
    """
    Get all categories ordered by name.

    Returns:
        List of category dicts with product_count
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT c.*,
               (SELECT COUNT(*) FROM products p WHERE p.category_id = c.id) as product_count
        FROM categories c
        ORDER BY c.name
    ''')
    return [dict(row) for row in cursor.fetchall()]


def get_category_by_id(category_id: int) -> dict:
    """Get category by ID, or None."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM categories WHERE id = ?', (category_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_category(name: str, description: str = '') -> int:
    """
    Create new category.

    Args:
        name: Unique category name
        description: Optional description

    Returns:
        New category ID

    Raises:
        ValidationError: If name is empty or already taken
    """
    name = sanitize_input(name, max_length=100)
    if not name:
        raise ValidationError({'name': MESSAGES['field_required']})

    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT id FROM categories WHERE name = ?', (name,))
    if cursor.fetchone():
        raise ValidationError({'name': MESSAGES['invalid_category']})

    cursor.execute('''
        INSERT INTO categories (name, description)
        VALUES (?, ?)
    ''', (name, sanitize_input(description, max_length=500)))

    db.commit()
    return cursor.lastrowid
