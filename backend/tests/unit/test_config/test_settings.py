"""Tests for environment-driven settings"""
from compliance_workflow.config.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.workflow_auto_evaluate is True
    assert settings.workflow_max_auto_transitions == 10
    assert settings.logs_path == ""


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("WORKFLOW_MAX_AUTO_TRANSITIONS", "25")
    monkeypatch.setenv("WORKFLOW_DEBUG", "true")

    settings = Settings(_env_file=None)

    assert settings.workflow_max_auto_transitions == 25
    assert settings.workflow_debug is True


def test_is_production():
    assert Settings(_env_file=None, environment="Production").is_production is True
    assert Settings(_env_file=None).is_production is False
