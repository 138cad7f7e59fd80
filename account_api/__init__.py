"""User account and bearer-token authentication API."""
