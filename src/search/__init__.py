"""
Search Module
-----------
Turns free-text search input into a literal, case-insensitive name pattern.
"""
