"""Shared infrastructure: exceptions, error codes, logging."""
