"""Command line interface for commtrack."""
