"""Dashboard API endpoints."""

from flask import Blueprint, current_app, request, jsonify

from app import get_aggregator
from services.dashboard_aggregator import UnknownSprint

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@bp.route("/sprints", methods=["GET"])
def list_sprints():
    """List the selectable sprints and the current selection."""
    aggregator = get_aggregator(current_app)
    return jsonify({
        "data": {
            "options": aggregator.sprint_options(),
            "selected": aggregator.selection
        }
    })


@bp.route("/view", methods=["GET"])
def get_view():
    """Get the derived view for the current selection.

    Returns:
        - KPI totals (worked hours, tasks, story points)
        - Task status distribution
        - Planned vs completed by task type
        - Top incomplete task cells by project and priority
    """
    aggregator = get_aggregator(current_app)
    return jsonify({"data": aggregator.get_derived_view().to_dict()})


@bp.route("/selection", methods=["POST"])
def set_selection():
    """Change the selected sprint.

    Expects JSON body with:
        - sprint: A sprint name or "All"

    Returns the recomputed view on success.
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({"error": "Missing request body"}), 400

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    sprint = data.get("sprint")
    if not sprint:
        return jsonify({"error": "Missing required field: sprint"}), 400

    if not isinstance(sprint, str):
        return jsonify({"error": "Field sprint must be a string"}), 400

    aggregator = get_aggregator(current_app)

    try:
        view = aggregator.set_selection(sprint)
    except UnknownSprint as e:
        return jsonify({"error": str(e)}), 404

    return jsonify({"data": view.to_dict()})


@bp.route("/scope-changes", methods=["GET"])
def get_scope_changes():
    """Get the planned/added/removed series for every sprint."""
    aggregator = get_aggregator(current_app)
    return jsonify({"data": [c.to_dict() for c in aggregator.scope_changes()]})


@bp.route("/palette", methods=["GET"])
def get_palette():
    """Get the chart colour palette as hex strings."""
    return jsonify({"data": current_app.config["PALETTE"]})
