"""Core infrastructure: configuration, logging, port rules, schema registry and graph views."""
