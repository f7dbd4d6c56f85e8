"""Warden: role-based access control service."""
