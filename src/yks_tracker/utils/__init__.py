"""Small display helpers shared by the CLI."""
