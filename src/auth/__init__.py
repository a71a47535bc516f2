"""
Auth Module
---------
Per-request identity supplied by bearer tokens, and the ownership gate that
protects edits and deletions of campgrounds and comments.
"""
