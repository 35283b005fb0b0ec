"""Command line interface for video duplicate finder."""
