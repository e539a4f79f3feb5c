"""Helpers shared by services, forms and views."""
