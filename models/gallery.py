"""
Gallery image data access functions.
Images are stored as external URLs; uploading lives outside this app.
"""

from database import get_db
from utils.exceptions import NotFoundError, ValidationError
from utils.messages import MESSAGES
from utils.validators import sanitize_input

GALLERY_CATEGORIES = ('bodas', 'cumpleanos', 'corporativos', 'otros')


def get_gallery_images(category: str = None) -> list:
    """
    List gallery images, newest first.

    Args:
        category: Filter by category (optional)

    Returns:
        List of image dicts
    """
    db = get_db()
    cursor = db.cursor()

    if category:
        cursor.execute('''
            SELECT * FROM gallery_images
            WHERE category = ?
            ORDER BY created_at DESC, id DESC
        ''', (category,))
    else:
        cursor.execute('SELECT * FROM gallery_images ORDER BY created_at DESC, id DESC')

    return [dict(row) for row in cursor.fetchall()]


def get_gallery_image_by_id(image_id: int) -> dict:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM gallery_images WHERE id = ?', (image_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_gallery_image(title: str, url: str, description: str = '',
                         category: str = 'otros') -> int:
    """
    Add an image to the gallery.

    Raises:
        ValidationError: Missing title or url, or unknown category
    """
    title = sanitize_input(title, max_length=200)
    url = sanitize_input(url, max_length=500)
    category = category or 'otros'

    errors = {}
    if not title:
        errors['title'] = MESSAGES['field_required']
    if not url:
        errors['url'] = MESSAGES['field_required']
    if category not in GALLERY_CATEGORIES:
        errors['category'] = MESSAGES['invalid_category']
    if errors:
        raise ValidationError(errors)

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO gallery_images (title, description, url, category)
        VALUES (?, ?, ?, ?)
    ''', (title, sanitize_input(description or '', max_length=1000), url, category))
    db.commit()
    return cursor.lastrowid


def delete_gallery_image(image_id: int) -> None:
    """
    Remove an image record.

    Raises:
        NotFoundError: If the image does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM gallery_images WHERE id = ?', (image_id,))
    db.commit()

    if cursor.rowcount == 0:
        raise NotFoundError('image', image_id)
