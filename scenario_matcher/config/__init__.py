"""Service configuration, logging and exceptions."""
