"""Kernel module."""

from .kernel import CRYPTIT, NEED_CRYPT, SIGNIT, IKernel

__all__ = ["IKernel", "SIGNIT", "CRYPTIT", "NEED_CRYPT"]
