"""Point-of-sale actions guarded by the permission gate."""
