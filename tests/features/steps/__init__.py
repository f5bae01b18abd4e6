"""Step definitions for behavioural tests."""
