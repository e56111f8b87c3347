"""Settings, logging, cache and dependency wiring."""
