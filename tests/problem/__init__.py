"""
Problem tests.

Tests for streamval.problem module:
- test_problem.py: Problem records, builder and message rendering
- test_dispatcher.py: Live and deferred dispatch
- test_printer.py: Line-oriented rendering of problem trees

Maps to: streamval/problem/
"""
