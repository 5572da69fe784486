"""Test helpers for building stored log rows."""
