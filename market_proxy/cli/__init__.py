"""Command-line entrypoints: market-proxy serve | fetch."""
