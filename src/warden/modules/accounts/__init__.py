"""Accounts: identities, their role assignments and sessions."""
