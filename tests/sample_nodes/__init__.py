"""Node kinds used by the discovery tests."""
