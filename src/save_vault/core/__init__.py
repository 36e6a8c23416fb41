"""Core save-vault services: registry, file sets and snapshots."""
