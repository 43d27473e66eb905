"""Admin dashboard route."""

from flask_login import login_required

from models.dashboard import get_dashboard_stats
from utils.api_response import api_success


def register_routes(bp):
    """Register dashboard routes on the blueprint."""

    @bp.route('/dashboard', methods=['GET'])
    @login_required
    def dashboard():
        """Summary counters for the landing page."""
        return api_success(data=get_dashboard_stats())
