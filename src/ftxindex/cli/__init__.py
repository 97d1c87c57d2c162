"""Command line interface for ftxindex."""
