"""HTTP integration for reqlog."""
