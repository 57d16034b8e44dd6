"""Shared utilities for MindCare platform."""
from .pii import hash_pii, hash_text_for_audit, configure_pii_salt
from .rounding import round_half_up

__all__ = ["hash_pii", "hash_text_for_audit", "configure_pii_salt", "round_half_up"]
