"""Property-based tests for the flowguard validation engine."""
