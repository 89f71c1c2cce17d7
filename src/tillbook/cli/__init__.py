"""CLI interface for tillbook."""
