# =======================================================================================
# app/__init__.py - Package Initialization
# =======================================================================================
"""
RFID Access Manager

Administration of users, scanners, RFID tokens and scanner access grants,
plus the access check endpoint that scanner devices call on every card tap.
"""

__version__ = "1.0.0"
__author__ = "RFID Access Manager Team"
