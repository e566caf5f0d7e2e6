"""
Tests for the texture atlas package.
"""
