"""
Core infrastructure for dnsguard: settings, logging, errors, locking and file I/O
"""
