"""Roles and the role <-> permission graph."""
