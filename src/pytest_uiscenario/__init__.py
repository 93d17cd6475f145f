"""Pytest plugin and runtime for declarative UI test scenarios.

The `pytest_uiscenario` package executes declarative test-case documents
(JSON or YAML) against a live web page through Playwright and produces a
structured pass/fail run report.

Key features:
- immutable, validated test-case, step, and validation models;
- a small interpreter resolving targets, dispatching actions, and
  evaluating hard and soft validations step by step;
- named custom actions and validations provided through an injected
  registry and entry-point plugins;
- scenario files collected as pytest test items and a command-line runner.
"""
