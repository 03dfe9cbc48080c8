"""
Configuration tests.

Tests for streamval.config module:
- Defaults and validation of the config singleton
- Settings picked up by readers and validators

Maps to: streamval/config.py
"""
