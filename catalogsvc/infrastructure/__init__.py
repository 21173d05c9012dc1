"""Infrastructure: configuration, logging and database access."""
