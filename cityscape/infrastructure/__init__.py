"""Infrastructure: presentation adapters and data sources."""
