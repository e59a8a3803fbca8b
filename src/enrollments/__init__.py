"""Enrollment ledger."""
