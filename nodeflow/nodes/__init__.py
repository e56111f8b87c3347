"""Node capability base classes."""
