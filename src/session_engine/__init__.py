"""Workout session engine: session lifecycle, timing, analytics and exercise suggestions."""
