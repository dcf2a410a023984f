"""Client for the Lacework REST API."""
