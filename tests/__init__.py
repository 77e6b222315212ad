"""Tests for eventlog_checker package."""
