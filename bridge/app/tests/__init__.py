"""Tests for the bridge application."""
