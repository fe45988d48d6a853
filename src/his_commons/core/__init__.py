"""Core building blocks: exceptions and request context."""
