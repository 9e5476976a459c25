"""Inventory app - stock items, sub-units and consumption records."""
