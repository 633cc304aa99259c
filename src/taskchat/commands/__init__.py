"""CLI command groups for taskchat."""
