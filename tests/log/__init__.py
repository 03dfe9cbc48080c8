"""
Logging tests.

Tests for streamval._logging module:
- test_formatters.py: JsonFormatter, HumanFormatter, scoped_logger
- test_config.py: setup_logging(), set_log_level(), environment

Maps to: streamval/_logging.py
"""
