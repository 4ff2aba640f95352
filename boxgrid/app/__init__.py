"""Interaction state machine and editor services."""
