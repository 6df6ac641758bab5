"""Derived read-only views over cached collections."""
