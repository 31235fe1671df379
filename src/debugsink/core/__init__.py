"""Payload models, classification and rendering."""
