"""Flask application factory."""

import json
import logging
import os
from flask import Flask
from flask_cors import CORS

from services.dashboard_aggregator import ALL_SPRINTS, DashboardAggregator, UnknownSprint
from services.sprint_catalogue import palette_to_hex

# Same name as app.logger
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(__file__), "..", "config", "dashboard-config.json"
)


def load_dashboard_config(app):
    """Load dashboard settings from the config file into app.config."""
    config_path = os.environ.get("DASHBOARD_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    app.config["DEFAULT_SELECTION"] = ALL_SPRINTS
    app.config["PALETTE"] = palette_to_hex()

    if not os.path.exists(config_path):
        app.logger.info("No dashboard-config.json found, using defaults")
        return

    try:
        with open(config_path, "r") as f:
            config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        app.logger.warning(f"Failed to load dashboard config: {e}")
        return

    if not isinstance(config, dict):
        app.logger.warning("Dashboard config must be a JSON object, using defaults")
        return

    default_selection = config.get("defaultSelection")
    if isinstance(default_selection, str) and default_selection:
        app.config["DEFAULT_SELECTION"] = default_selection
    elif default_selection is not None:
        app.logger.warning(f"Ignoring invalid defaultSelection: {default_selection!r}")

    palette = config.get("palette")
    if isinstance(palette, list) and palette and all(isinstance(c, str) for c in palette):
        app.config["PALETTE"] = palette
    elif palette is not None:
        app.logger.warning(f"Ignoring invalid palette: {palette!r}")

    app.logger.info(f"Loaded dashboard config from {config_path}")


def log_refresh(view):
    """Log each dashboard refresh on the application logger."""
    logger.info(
        f"Dashboard view refreshed for {view.selection}: "
        f"{view.tasks_completed}/{view.tasks_assigned} tasks, "
        f"{view.total_worked_hours}h"
    )


def get_aggregator(app) -> DashboardAggregator:
    """Return the aggregator owned by this app instance."""
    return app.extensions["dashboard_aggregator"]


def create_app(aggregator=None):
    """Create and configure the Flask application.

    Args:
        aggregator: Optional pre-built DashboardAggregator. A fresh one is
            created when omitted.
    """
    app = Flask(__name__)

    # Enable CORS for frontend
    CORS(app, resources={
        r"/api/*": {
            "origins": ["http://localhost:5173", "http://127.0.0.1:5173"],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    load_dashboard_config(app)

    if aggregator is None:
        default_selection = app.config["DEFAULT_SELECTION"]
        try:
            aggregator = DashboardAggregator(selection=default_selection)
        except UnknownSprint:
            app.logger.warning(
                f"Configured default sprint {default_selection!r} not found, using {ALL_SPRINTS}"
            )
            aggregator = DashboardAggregator()

    aggregator.subscribe(log_refresh)
    app.extensions["dashboard_aggregator"] = aggregator

    # Register blueprints
    from app.api import dashboard, debug
    app.register_blueprint(dashboard.bp)
    app.register_blueprint(debug.bp)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    return app
