"""
Authentication routes: login, logout, current user.
Admin identity for the back office, answered as JSON.
"""

import logging

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES, get_message

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Sign an admin in.

    Body (JSON or form): username, password, remember_me (optional)
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(MESSAGES['validation_failed'], status=400, errors=form.errors)

    # Get user by username
    user_dict = get_user_by_username(form.username.data)

    # Check credentials
    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.info(f"Failed login for '{form.username.data}'")
        return api_error(MESSAGES['invalid_credentials'], status=401)

    # Check if user is active
    if not user_dict.get('active'):
        return api_error(MESSAGES['account_disabled'], status=403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        data=user.to_dict(),
        message=get_message('login_success', name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Sign the current admin out."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """Current admin identity."""
    return api_success(data=current_user.to_dict())
