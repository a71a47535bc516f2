"""
Configuration
-------------
Environment driven settings. External collaborators receive their
configuration object through their constructor instead of reading it globally.
"""
import os
from dataclasses import dataclass

DATABASE_URL = os.getenv("DB_URL", "sqlite:///./campgrounds.db")

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "CampgroundListingApp/1.0"
REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class GeocodingConfig:
    base_url: str = NOMINATIM_SEARCH_URL
    user_agent: str = USER_AGENT
    timeout: float = REQUEST_TIMEOUT

    @classmethod
    def from_env(cls):
        return cls(
            base_url=os.getenv("GEOCODER_URL", NOMINATIM_SEARCH_URL),
            user_agent=os.getenv("GEOCODER_USER_AGENT", USER_AGENT),
            timeout=float(os.getenv("GEOCODER_TIMEOUT", REQUEST_TIMEOUT)),
        )


@dataclass(frozen=True)
class MediaConfig:
    backend: str = "local"
    upload_dir: str = "uploads"
    public_base_url: str = "/uploads"
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    timeout: float = 30

    @classmethod
    def from_env(cls):
        return cls(
            backend=os.getenv("MEDIA_BACKEND", "local"),
            upload_dir=os.getenv("MEDIA_UPLOAD_DIR", os.path.join(os.getcwd(), "uploads")),
            public_base_url=os.getenv("MEDIA_PUBLIC_URL", "/uploads"),
            cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
            api_key=os.getenv("CLOUDINARY_API_KEY", ""),
            api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
            timeout=float(os.getenv("MEDIA_TIMEOUT", 30)),
        )


@dataclass(frozen=True)
class AuthConfig:
    secret_key: str = "change-me"
    algorithm: str = "HS256"

    @classmethod
    def from_env(cls):
        return cls(
            secret_key=os.getenv("JWT_SECRET_KEY", "change-me"),
            algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        )
