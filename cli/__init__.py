"""Command-line interface for tagging photos with weather readings."""
