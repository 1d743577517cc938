"""Shared service utilities.

Modules:
  - http: pre-configured ``requests.Session`` with retry and default timeout
"""
