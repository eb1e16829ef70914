"""Schema and seed data for the index store."""
