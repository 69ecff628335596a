"""
Customers module - license holders.

This module handles:
- Customer entity
- Customer lookup during license issuance
"""
