"""Configuration and database setup."""
