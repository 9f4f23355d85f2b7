"""Binding credentials."""

from .binder import Binder

__all__ = ["Binder"]
