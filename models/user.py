"""
Back office administrators.
A single admin role: every active user can manage the whole catalog.
"""

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from database import get_db


class User(UserMixin):
    """Logged-in administrator, built from a users row."""

    def __init__(self, user_dict):
        self.id = user_dict['id']
        self.username = user_dict['username']
        self.email = user_dict['email']
        self.full_name = user_dict.get('full_name')
        self.active = user_dict['active']
        self.last_login = user_dict.get('last_login')

    @property
    def is_active(self):
        return self.active == 1

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'last_login': self.last_login,
        }


def _fetch_user(column: str, value) -> dict:
    db = get_db()
    row = db.execute(f'SELECT * FROM users WHERE {column} = ?', (value,)).fetchone()
    return dict(row) if row else None


def get_user_by_id(user_id: int) -> dict:
    """User dict or None."""
    return _fetch_user('id', user_id)


def get_user_by_username(username: str) -> dict:
    """User dict or None. Usernames are matched exactly."""
    return _fetch_user('username', username)


def create_user(username: str, email: str, password: str, full_name: str = None) -> int:
    """
    Create an administrator with a hashed password.

    Args:
        username: Unique login name
        email: Unique email
        password: Plain text password (stored hashed)
        full_name: Display name

    Returns:
        New user ID

    Raises:
        sqlite3.IntegrityError if username or email already exists
    """
    db = get_db()
    cursor = db.execute('''
        INSERT INTO users (username, email, password_hash, full_name)
        VALUES (?, ?, ?, ?)
    ''', (username, email, generate_password_hash(password), full_name))
    db.commit()
    return cursor.lastrowid


def update_last_login(user_id: int) -> None:
    db = get_db()
    db.execute('UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?', (user_id,))
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """True if the password matches the stored hash."""
    return check_password_hash(user_dict['password_hash'], password)
