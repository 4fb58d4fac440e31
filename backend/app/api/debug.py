"""Debug API endpoints for troubleshooting."""

from flask import Blueprint, current_app, jsonify

from app import get_aggregator

bp = Blueprint("debug", __name__, url_prefix="/api/debug")


@bp.route("/catalogue", methods=["GET"])
def get_catalogue():
    """Dump the raw seeded sprint records, in catalogue order."""
    catalogue = get_aggregator(current_app).catalogue

    return jsonify({
        "data": {
            "sprints": [record.to_dict() for record in catalogue.values()],
            "total_sprints": len(catalogue)
        }
    })


@bp.route("/catalogue/<name>", methods=["GET"])
def get_catalogue_record(name):
    """Dump a single raw sprint record."""
    record = get_aggregator(current_app).catalogue.get(name)

    if record is None:
        return jsonify({"error": "Sprint not found"}), 404

    return jsonify({"data": record.to_dict()})
