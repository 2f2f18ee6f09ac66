"""
Smashtats - Smash Up Scorekeeper

A companion for tracking a Smash Up session at the table.
The package provides:
- A roster of known players (with avatar photos)
- Player selection and faction choices for the current session
- A session flow gating each setup step
- Victory point tracking
- A REST API for the mobile client
"""

__version__ = "0.1.0"
