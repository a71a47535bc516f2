"""
Services Module
-------------
Campground creation and update pipelines, and the comment lifecycle.
"""
