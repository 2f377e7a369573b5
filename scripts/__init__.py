"""Command-line helpers for talking to a running Blog Generator service."""
