"""
dnsguard - persistent configuration core of a DNS filtering gateway
"""

__version__ = "0.1.0"
