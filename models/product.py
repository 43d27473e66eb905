"""
Rentable product data access functions.
Handles product CRUD for the admin catalog and public listing.

Booking flows never touch products.stock: reservations consume
date-scoped availability (see models/stock.py), not the stock count.
"""

from database import get_db
from models.category import get_category_by_id
from utils.exceptions import ValidationError, ProductNotFoundError
from utils.messages import MESSAGES
from utils.validators import parse_non_negative_number, sanitize_input

PRODUCT_FIELDS = ('name', 'description', 'price', 'stock', 'available', 'category_id', 'image_url')


def get_all_products(category_id: int = None, available_only: bool = False) -> list:
    """
    Get all products.

    Args:
        category_id: Filter by category ID (optional)
        available_only: If True, only return products flagged available

    Returns:
        List of product dicts with category name
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT p.*, c.name as category_name
        FROM products p
        LEFT JOIN categories c ON p.category_id = c.id
        WHERE 1=1
    '''

    params = []

    if category_id:
        query += ' AND p.category_id = ?'
        params.append(category_id)

    if available_only:
        query += ' AND p.available = 1'

    query += ' ORDER BY p.created_at DESC, p.id DESC'

    cursor.execute(query, params)
    rows = cursor.fetchall()
    return [dict(row) for row in rows]


def get_product_by_id(product_id: int) -> dict:
    """
    Get product by ID.

    Args:
        product_id: Product ID

    Returns:
        Product dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT p.*, c.name as category_name
        FROM products p
        LEFT JOIN categories c ON p.category_id = c.id
        WHERE p.id = ?
    ''', (product_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def validate_product_data(data: dict, partial: bool = False) -> dict:
    """
    Validate and normalize product fields.

    Args:
        data: Raw input dict
        partial: If True, only fields present in data are validated (updates)

    Returns:
        dict of clean values for the fields present

    Raises:
        ValidationError: With per-field messages
    """
    errors = {}
    clean = {}

    if not partial or 'name' in data:
        name = sanitize_input(data.get('name'), max_length=200)
        if not name:
            errors['name'] = MESSAGES['field_required']
        clean['name'] = name

    if 'description' in data:
        clean['description'] = sanitize_input(data.get('description'), max_length=2000)

    if not partial or 'price' in data:
        price = parse_non_negative_number(data.get('price'))
        if price is None:
            errors['price'] = MESSAGES['invalid_price']
        clean['price'] = price

    if not partial or 'stock' in data:
        stock = data.get('stock')
        try:
            stock = int(str(stock).strip())
        except (ValueError, TypeError):
            stock = -1
        if stock < 0:
            errors['stock'] = MESSAGES['invalid_stock']
        clean['stock'] = stock

    if 'available' in data:
        clean['available'] = 1 if data.get('available') in (True, 1, '1', 'true', 'on') else 0

    if 'category_id' in data:
        category_id = data.get('category_id') or None
        if category_id is not None and not get_category_by_id(category_id):
            errors['category_id'] = MESSAGES['invalid_category']
        clean['category_id'] = category_id

    if 'image_url' in data:
        clean['image_url'] = sanitize_input(data.get('image_url'), max_length=500) or None

    if errors:
        raise ValidationError(errors)

    return clean


def create_product(data: dict) -> int:
    """
    Create new product.

    Args:
        data: name, price, stock required; description, available,
              category_id, image_url optional

    Returns:
        New product ID
    """
    clean = validate_product_data(data)
    clean.setdefault('available', 1)

    db = get_db()
    cursor = db.cursor()

    columns = [f for f in PRODUCT_FIELDS if f in clean]
    placeholders = ', '.join('?' * len(columns))
    cursor.execute(f'''
        INSERT INTO products ({', '.join(columns)})
        VALUES ({placeholders})
    ''', [clean[c] for c in columns])

    db.commit()
    return cursor.lastrowid


def update_product(product_id: int, data: dict) -> bool:
    """
    Update product fields.

    Args:
        product_id: Product ID
        data: Fields to update

    Returns:
        True if updated

    Raises:
        ProductNotFoundError: If the product does not exist
    """
    if not get_product_by_id(product_id):
        raise ProductNotFoundError(product_id)

    clean = validate_product_data(data, partial=True)
    if not clean:
        return False

    db = get_db()
    cursor = db.cursor()

    set_clause = ', '.join(f'{field} = ?' for field in clean)
    values = list(clean.values()) + [product_id]

    cursor.execute(f'''
        UPDATE products
        SET {set_clause}, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', values)

    db.commit()
    return cursor.rowcount > 0


def delete_product(product_id: int) -> bool:
    """
    Delete product.
    Historical line items keep their snapshot; their product_id is set to NULL.

    Args:
        product_id: Product ID

    Returns:
        True if deleted

    Raises:
        ProductNotFoundError: If the product does not exist
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('DELETE FROM products WHERE id = ?', (product_id,))
    db.commit()

    if cursor.rowcount == 0:
        raise ProductNotFoundError(product_id)
    return True
