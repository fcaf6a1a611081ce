"""Feature modules grouped by domain."""
