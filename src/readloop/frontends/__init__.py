"""Frontends - user interfaces built on readloop.core."""
