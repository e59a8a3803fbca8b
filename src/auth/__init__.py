"""User signup, login and listing."""
