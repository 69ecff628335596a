"""
Activations module - machine activations and activation slots.

This module handles:
- Activation entity and machine fingerprinting
- Slot allocation against the license activation limit
- License validation, deactivation and signed attestations
"""
