"""Buzzboard domain services.

Packages here hold the session and round logic imported by HTTP routes and
socket handlers, keeping transport concerns separated from the buzz ordering
rules.
"""
