"""Command-line interface for operating the WhiteHatLink backend."""
