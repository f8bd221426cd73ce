"""
Test suite for the fee & loyalty engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
