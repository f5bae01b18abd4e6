"""Shared builders and fakes for sitedrop tests."""
