from flask import jsonify

from inkfolio.auth import admin_required
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository


# Stats endpoint for the admin dashboard
@api_bp.route('/stats', methods=['GET'])
@admin_required
def get_stats():
    return jsonify(get_repository().stats())
