"""Infrastructure layer - technical services shared by all patterns."""
