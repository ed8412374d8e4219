"""Quart web front end for AppPhoto AI."""
