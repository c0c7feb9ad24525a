"""Prefixed text command dispatch for Discord bots."""
