"""
Games module - Game-specific data.

Each game has its own subpackage with:
- Faction/deck catalogue
- Default setup
"""
