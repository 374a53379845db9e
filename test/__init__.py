"""usergraph test package."""
