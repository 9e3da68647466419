"""
API routers for dnsguard
"""

from . import control

__all__ = ['control']
