"""Cross-cutting infrastructure: settings, logging, and the database layer."""
