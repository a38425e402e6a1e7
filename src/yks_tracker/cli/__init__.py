"""Command line interface (typer app: yks)."""
