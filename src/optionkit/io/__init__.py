"""IO - Storage backends."""
