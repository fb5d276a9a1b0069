"""Dropbox API v2 HTTP transport."""
