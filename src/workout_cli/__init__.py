"""Command-line host for the session engine."""
