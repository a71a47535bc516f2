"""
Database Module
-------------
Handles database connections, ORM models, and database operations.
Uses SQLAlchemy and defines the schema for campgrounds, comments and the
ordered list of comments attached to each campground.
"""
