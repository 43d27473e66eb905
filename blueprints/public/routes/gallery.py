"""Public gallery route."""

from flask import request

from models.gallery import get_gallery_images
from utils.api_response import api_success


def register_routes(bp):
    """Register gallery routes on the blueprint."""

    @bp.route('/gallery', methods=['GET'])
    def list_gallery():
        images = get_gallery_images(category=request.args.get('category'))
        return api_success(data=images, count=len(images))
