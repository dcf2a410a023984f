"""Command-line client for the Lacework cloud security platform."""
