"""Models for Lacework API resources and credentials."""
