"""Database access for the PostgreSQL weight store."""
