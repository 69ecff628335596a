"""
Audit module - append-only trail of validation and activation decisions.

This module handles:
- Audit entry entity
- Appending entries for every decided validation and deactivation
- Listing entries for a license
"""
