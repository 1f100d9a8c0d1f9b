"""Concrete adapters for every external dependency (APIs, SQLite, cache, Slack)."""
