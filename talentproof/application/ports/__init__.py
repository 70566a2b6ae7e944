"""Ports (interfaces) implemented by infrastructure adapters and stubs."""
