"""Passport module."""

from .passport import IPassport, PassportList

__all__ = ["IPassport", "PassportList"]
