"""Outbound services (transactional email)."""
