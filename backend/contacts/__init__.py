"""Contacts app - customers and suppliers, per branch."""
