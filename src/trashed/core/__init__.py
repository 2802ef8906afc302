"""Core lifecycle engine: capture, retention, prune and restore."""
