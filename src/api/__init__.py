"""
API Module
---------
Provides the HTTP surface of the campground listing service using FastAPI.
Features include:
- Listing and searching campgrounds by name
- Creating campgrounds with a photo upload and a geocoded location
- Editing and deleting campgrounds owned by the current user
- Adding, editing and deleting comments on a campground
"""
