"""Generation provider implementations."""
