"""Database helpers for the test suite."""
