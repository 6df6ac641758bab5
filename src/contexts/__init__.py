"""Resource contexts: one cache per entity type."""
