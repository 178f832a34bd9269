"""Shared HTML pages and cold-summary transcripts for tests."""
