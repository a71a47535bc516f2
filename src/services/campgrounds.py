"""
Campground pipelines.

Creation runs media validation, media storage, geocoding and persistence in
that order, each awaited without blocking the event loop. Any stage failing
aborts the whole operation before anything is written to the database. An
image stored before a geocoding failure is left in place; no compensating
cleanup is attempted.
"""
import asyncio
from typing import List, Optional, Tuple

from src.db.database import CampgroundDB
from src.db.store import ResourceStore
from src.geocoding.nominatim import GeocodingEnricher
from src.media.uploads import ImageUpload, MediaUploadPipeline
from src.models.campground import AuthorStamp, CampgroundForm, CampgroundPatch
from src.search.filter import build_search_predicate

NO_MATCH_MESSAGE = "No campgrounds match that query, please try again."


class CampgroundService:
    def __init__(self, store: ResourceStore, media: MediaUploadPipeline, geocoder: GeocodingEnricher):
        self.store = store
        self.media = media
        self.geocoder = geocoder

    def list_campgrounds(self, query: Optional[str] = None) -> Tuple[List[CampgroundDB], Optional[str]]:
        """
        Return campgrounds, filtered by name when a query is given.

        The second element is a "no match" message, set only when a query was
        supplied and nothing matched.
        """
        pattern = build_search_predicate(query)
        campgrounds = self.store.list_campgrounds(pattern)
        no_match = NO_MATCH_MESSAGE if pattern is not None and not campgrounds else None
        return campgrounds, no_match

    def get_campground(self, campground_id: str) -> CampgroundDB:
        return self.store.require_campground(campground_id)

    async def create_campground(self, form: CampgroundForm, image: ImageUpload,
                                author: AuthorStamp) -> CampgroundDB:
        image_url = await self.media.upload(image.filename, image.content)
        geocoded = await self.geocoder.geocode(form.location)
        return await asyncio.to_thread(
            self.store.create_campground,
            name=form.name,
            price=form.price,
            description=form.description,
            image=image_url,
            location=geocoded.formatted_address,
            lat=geocoded.lat,
            lng=geocoded.lng,
            author=author,
        )

    async def update_campground(self, campground_id: str, patch: CampgroundPatch,
                                image: Optional[ImageUpload] = None,
                                location: Optional[str] = None) -> CampgroundDB:
        values = patch.model_dump(exclude_none=True)
        if image is not None:
            values["image"] = await self.media.upload(image.filename, image.content)
        if location:
            geocoded = await self.geocoder.geocode(location)
            values.update(location=geocoded.formatted_address, lat=geocoded.lat, lng=geocoded.lng)
        # The campground may have been deleted since the ownership check
        return await asyncio.to_thread(self.store.update_campground, campground_id, values)

    def delete_campground(self, campground_id: str) -> None:
        self.store.delete_campground(campground_id)
