"""
Public storefront blueprint.
Registers the catalog, cart, quotation and gallery routes under /api.

Route logic lives in:
- routes/catalog.py - Products, categories, availability, health
- routes/cart.py - Session cart
- routes/quotations.py - Quotation submission
- routes/gallery.py - Public gallery
"""

from flask import Blueprint

# Create the public blueprint
public_bp = Blueprint('public', __name__)

# Import and register routes from submodules
from blueprints.public.routes import catalog, cart, quotations, gallery

catalog.register_routes(public_bp)
cart.register_routes(public_bp)
quotations.register_routes(public_bp)
gallery.register_routes(public_bp)
