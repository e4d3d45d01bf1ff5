"""
Test Suite

This module contains all tests for the compliance workflow engine.

Structure:
    tests/
    ├── __init__.py             # This file
    ├── conftest.py             # Pytest fixtures
    └── unit/                   # Unit tests
        ├── test_engine/        # Engine, resolver, validator, audit hooks
        ├── test_definitions/   # Built-in authorization and incident workflows
        ├── test_domain/        # Models and errors
        ├── test_config/        # Environment settings
        └── test_utils/         # Utility tests

To run tests:
    pytest backend/tests/
    pytest backend/tests/unit/test_engine/
"""
