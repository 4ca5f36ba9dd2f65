"""Web services backing the routes."""
