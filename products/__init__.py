"""
Products module - licensable products and their license defaults.
"""
