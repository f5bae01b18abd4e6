"""Test suite for sitedrop."""
