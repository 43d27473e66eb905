"""
Database seed data.
Initial data population for fresh database installations.
"""

import os
from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Default admin user
    admin_password = os.environ.get('ADMIN_PASSWORD', 'admin123')
    db.execute('''
        INSERT INTO users (username, email, password_hash, full_name)
        VALUES (?, ?, ?, ?)
    ''', ('admin', 'admin@creaparty.com', generate_password_hash(admin_password), 'Administrador'))

    # 2. Catalog categories
    categories_data = [
        ('Sillas', 'Sillas para eventos'),
        ('Mesas', 'Mesas redondas, rectangulares y periqueras'),
        ('Mantelería', 'Manteles, caminos y servilletas'),
        ('Decoración', 'Centros de mesa, arcos y ambientación'),
        ('Iluminación', 'Luces, guirnaldas y candelabros'),
    ]

    for name, description in categories_data:
        db.execute('''
            INSERT INTO categories (name, description)
            VALUES (?, ?)
        ''', (name, description))
