"""
Media Module
----------
Validates uploaded campground photos and stores them, returning a durable URL.
Storage is either the local filesystem or Cloudinary's upload API.
"""
