"""Test suite for the pytest-uiscenario package.

This package contains unit and integration tests covering document
loading, target resolution, action dispatch, validation evaluation,
pytest integration, and the command-line runner.
"""
