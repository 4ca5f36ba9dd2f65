"""Maintenance scripts for IIIFNotifications."""
