"""
Licenses module - License management.

This module handles:
- License entity and key generation
- License lifecycle (issue, renew, suspend, resume, revoke)
- License state evaluation
"""
