"""Shared fixtures for Sprint Dashboard tests."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def catalogue():
    """Freshly built seeded catalogue."""
    from services.sprint_catalogue import build_catalogue
    return build_catalogue()


@pytest.fixture
def aggregator():
    """Aggregator over the seeded catalogue, starting on "All"."""
    from services.dashboard_aggregator import DashboardAggregator
    return DashboardAggregator()


@pytest.fixture
def all_sprint_totals():
    """Hand-summed scalar totals across the five seeded sprints."""
    return {
        "total_worked_hours": 424,
        "tasks_completed": 73,
        "tasks_assigned": 117,
        "story_points_completed": 331.0,
        "story_points_planned": 345.0
    }


@pytest.fixture
def all_sprint_status():
    """Hand-summed status distribution across all sprints, in seed order."""
    return [
        ("Closed", 73),
        ("Validated", 4),
        ("Review", 6),
        ("Open", 5),
        ("On Hold", 5),
        ("In Progress", 17)
    ]


@pytest.fixture
def all_sprint_types():
    """Hand-summed (planned, completed) per task type across all sprints."""
    return [
        ("Bug", 35, 16),
        ("Feature", 38, 22),
        ("Blog", 17, 11),
        ("KB", 15, 13),
        ("UG", 12, 11)
    ]


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the app at a temporary config file path and return a writer."""
    path = tmp_path / "dashboard-config.json"
    monkeypatch.setenv("DASHBOARD_CONFIG_PATH", str(path))

    def write(content):
        path.write_text(content)
        return path

    return write


@pytest.fixture
def app(config_file):
    """Create Flask test app with no config file present."""
    from app import create_app
    app = create_app()
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()
