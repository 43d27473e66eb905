"""Gallery management routes."""

from flask import request
from flask_login import login_required

from models.gallery import create_gallery_image, delete_gallery_image, get_gallery_image_by_id
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES


def register_routes(bp):
    """Register gallery routes on the blueprint."""

    @bp.route('/gallery', methods=['POST'])
    @login_required
    def create_image():
        """
        Add a gallery image by URL.

        Request body:
            title, url: Required
            description, category: Optional (category defaults to 'otros')
        """
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        image_id = create_gallery_image(
            title=data.get('title'),
            url=data.get('url'),
            description=data.get('description') or '',
            category=data.get('category') or 'otros'
        )
        return api_success(data=get_gallery_image_by_id(image_id), message=MESSAGES['image_created'], status=201)

    @bp.route('/gallery/<int:image_id>', methods=['DELETE'])
    @login_required
    def delete_image(image_id):
        delete_gallery_image(image_id)
        return api_success(message=MESSAGES['image_deleted'])
