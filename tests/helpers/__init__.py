"""Shared builders for flowguard tests."""
