"""Feature modules for his-commons."""
