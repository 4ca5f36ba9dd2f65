"""Notification aggregation pipeline."""
