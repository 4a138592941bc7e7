"""Shared infrastructure: configuration, logging, sinks and throttling."""
