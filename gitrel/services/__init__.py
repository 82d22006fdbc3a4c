"""Business logic behind the commands."""
