"""Command line interface for bqtokenize."""
