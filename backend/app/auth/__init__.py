# app/auth/__init__.py
"""
Authentication modules for JobJaeger.

This package contains:
- identity.py: Canonical authenticated identity model (the request principal)
"""
from app.auth.identity import Identity

__all__ = ["Identity"]
