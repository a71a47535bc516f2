"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Request payloads are validated once at the API boundary and handed to the
store and services as typed values.
"""
