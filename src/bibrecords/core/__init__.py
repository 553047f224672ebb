"""Core record model, diagnostics, and configuration for bibrecords."""
