"""Runtime settings and template repository configuration."""
