"""Centralized, importable test fixtures package.

Reply builders and the fake adapter live in ``tests.fixtures.replies``.
"""
