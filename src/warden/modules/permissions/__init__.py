"""Permission catalog: named, url-addressed actions."""
