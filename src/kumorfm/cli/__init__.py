"""Command-line interface for kumorfm."""
