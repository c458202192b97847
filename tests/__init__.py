"""
COVID-19 Russia Monitor - Test Suite

This package contains all tests for the application.

Structure:
    unit/: Unit tests for extraction, history, stores, scrapers and config
    integration/: End-to-end crawls against a mocked page and SQLite stores

Running Tests:
    # Run all tests
    pytest

    # Run only unit tests
    pytest tests/unit

    # Skip integration tests
    pytest -m "not integration"
"""
