"""AWS provider implementations."""
