"""Test suite for the alert prioritization engine."""
