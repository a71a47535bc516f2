"""
Geocoding Module
--------------
Handles forward geocoding of free-text locations into coordinates and a
canonical address. Uses OpenStreetMap's Nominatim search API.
"""
