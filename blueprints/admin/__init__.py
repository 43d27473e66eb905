"""
Admin back-office blueprint.
Registers dashboard, catalog, quotation, reservation and gallery management
routes under /admin. Every route requires a signed-in admin.

Route logic lives in:
- routes/dashboard.py - Dashboard counters
- routes/products.py - Products and categories
- routes/quotations.py - Quotation review and conversion
- routes/reservations.py - Reservation management
- routes/gallery.py - Gallery images
"""

from flask import Blueprint

# Create the admin blueprint
admin_bp = Blueprint('admin', __name__)

# Import and register routes from submodules
from blueprints.admin.routes import dashboard, products, quotations, reservations, gallery

dashboard.register_routes(admin_bp)
products.register_routes(admin_bp)
quotations.register_routes(admin_bp)
reservations.register_routes(admin_bp)
gallery.register_routes(admin_bp)
