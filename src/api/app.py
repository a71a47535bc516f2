"""
HTTP routes of the campground listing service.

Campground create and update take multipart form fields because they carry a
photo upload. Comments carry text only and take a JSON body.
"""
from fastapi import FastAPI, Depends, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from functools import lru_cache
from pydantic import ValidationError
from sqlalchemy.orm import Session
import asyncio
import logging
from typing import Optional

from src.auth.guard import AuthorizationGuard, ResourceKind
from src.auth.identity import IdentityContext, require_identity
from src.config import GeocodingConfig, MediaConfig
from src.db.database import get_db
from src.db.store import ResourceStore
from src.exceptions import (
    AuthenticationRequiredError, AuthorizationError, CampgroundServiceError, GeocodingError,
    InvalidMediaError, MediaStorageError, NotFoundError, PersistenceError
)
from src.geocoding.nominatim import GeocodingEnricher
from src.media.uploads import ImageUpload, MediaUploadPipeline
from src.models.campground import (
    Campground, CampgroundDetail, CampgroundForm, CampgroundPatch, Comment, CommentForm
)
from src.services.campgrounds import CampgroundService
from src.services.comments import CommentService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Campground Listing API",
    description="Community campground listings with photos, geocoded locations and comments",
    version="1.0.0"
)

ERROR_STATUS = {
    NotFoundError: 404,
    AuthorizationError: 403,
    AuthenticationRequiredError: 401,
    InvalidMediaError: 400,
    MediaStorageError: 502,
    GeocodingError: 502,
    PersistenceError: 500,
}

CAMPGROUND_FORM_FIELDS = ["name", "price", "description", "location", "image"]


@lru_cache
def media_config():
    return MediaConfig.from_env()


@lru_cache
def get_geocoder() -> GeocodingEnricher:
    return GeocodingEnricher(GeocodingConfig.from_env())


@lru_cache
def get_media_pipeline() -> MediaUploadPipeline:
    return MediaUploadPipeline(media_config())


if media_config().backend == "local":
    app.mount(
        media_config().public_base_url,
        StaticFiles(directory=media_config().upload_dir, check_dir=False),
        name="uploads"
    )


def get_store(db: Session = Depends(get_db)) -> ResourceStore:
    return ResourceStore(db)


def get_campground_service(
    store: ResourceStore = Depends(get_store),
    media: MediaUploadPipeline = Depends(get_media_pipeline),
    geocoder: GeocodingEnricher = Depends(get_geocoder)
) -> CampgroundService:
    return CampgroundService(store, media, geocoder)


def get_comment_service(store: ResourceStore = Depends(get_store)) -> CommentService:
    return CommentService(store)


def campground_owner(
    campground_id: str,
    identity: IdentityContext = Depends(require_identity),
    store: ResourceStore = Depends(get_store)
) -> IdentityContext:
    AuthorizationGuard(store).ensure_owner(ResourceKind.CAMPGROUND, campground_id, identity.user_id)
    return identity


def comment_owner(
    campground_id: str,
    comment_id: str,
    identity: IdentityContext = Depends(require_identity),
    store: ResourceStore = Depends(get_store)
) -> IdentityContext:
    # A comment is only reachable through the campground that lists it
    store.require_campground(campground_id)
    if not store.campground_lists_comment(campground_id, comment_id):
        raise NotFoundError("comment", comment_id)
    AuthorizationGuard(store).ensure_owner(ResourceKind.COMMENT, comment_id, identity.user_id)
    return identity


def fallback_location(request: Request, exc: CampgroundServiceError) -> str:
    """Where the client should be sent after a failed request."""
    referer = request.headers.get("referer")
    if referer:
        return referer
    campground_id = request.path_params.get("campground_id")
    if campground_id is None or (isinstance(exc, NotFoundError) and exc.details.get("resource") == "campground"):
        return "/campgrounds"
    return f"/campgrounds/{campground_id}"


@app.exception_handler(CampgroundServiceError)
async def service_error_handler(request: Request, exc: CampgroundServiceError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "redirect": fallback_location(request, exc)}
    )


def validated(model, **fields):
    """Build a request schema from form fields, reporting problems as a 422."""
    try:
        return model(**fields)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))


@app.get("/")
def read_root():
    return {"message": "Welcome to the Campground Listing API"}


# INDEX - show all campgrounds, or those whose name matches the search
@app.get("/campgrounds")
def list_campgrounds(
    search: Optional[str] = None,
    service: CampgroundService = Depends(get_campground_service)
):
    campgrounds, no_match = service.list_campgrounds(search)
    return {
        "campgrounds": [Campground.from_db(c) for c in campgrounds],
        "no_match": no_match
    }


# NEW - describe the form for creating a campground
@app.get("/campgrounds/new")
def new_campground(identity: IdentityContext = Depends(require_identity)):
    return {"fields": CAMPGROUND_FORM_FIELDS, "author": identity.stamp()}


# CREATE - add a new campground
@app.post("/campgrounds", status_code=201)
async def create_campground(
    name: str = Form(...),
    price: float = Form(...),
    description: str = Form(...),
    location: str = Form(...),
    image: UploadFile = File(...),
    identity: IdentityContext = Depends(require_identity),
    service: CampgroundService = Depends(get_campground_service)
):
    form = validated(CampgroundForm, name=name, price=price, description=description, location=location)
    upload = ImageUpload(filename=image.filename, content=await image.read())
    campground = await service.create_campground(form, upload, identity.stamp())
    return {
        "message": "Successfully created the campground",
        "campground": await asyncio.to_thread(Campground.from_db, campground),
        "redirect": f"/campgrounds/{campground.id}"
    }


# SHOW - one campground with its comments
@app.get("/campgrounds/{campground_id}", response_model=CampgroundDetail)
def show_campground(campground_id: str, service: CampgroundService = Depends(get_campground_service)):
    return CampgroundDetail.from_db(service.get_campground(campground_id))


# EDIT - current values for the edit form
@app.get("/campgrounds/{campground_id}/edit", response_model=Campground)
def edit_campground(
    campground_id: str,
    identity: IdentityContext = Depends(campground_owner),
    service: CampgroundService = Depends(get_campground_service)
):
    return Campground.from_db(service.get_campground(campground_id))


# UPDATE - change name, price, description, photo or location
@app.put("/campgrounds/{campground_id}")
async def update_campground(
    campground_id: str,
    name: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    identity: IdentityContext = Depends(campground_owner),
    service: CampgroundService = Depends(get_campground_service)
):
    patch = validated(CampgroundPatch, name=name, price=price, description=description)
    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(filename=image.filename, content=await image.read())
    campground = await service.update_campground(campground_id, patch, upload, location)
    return {
        "message": "Successfully updated the campground",
        "campground": await asyncio.to_thread(Campground.from_db, campground),
        "redirect": f"/campgrounds/{campground.id}"
    }


# DESTROY - remove a campground and its comments
@app.delete("/campgrounds/{campground_id}")
def delete_campground(
    campground_id: str,
    identity: IdentityContext = Depends(campground_owner),
    service: CampgroundService = Depends(get_campground_service)
):
    service.delete_campground(campground_id)
    return {"message": "Successfully deleted the campground", "redirect": "/campgrounds"}


# Comments NEW - the campground being commented on
@app.get("/campgrounds/{campground_id}/comments/new")
def new_comment(
    campground_id: str,
    identity: IdentityContext = Depends(require_identity),
    service: CampgroundService = Depends(get_campground_service)
):
    return {"campground": Campground.from_db(service.get_campground(campground_id))}


# Comments CREATE
@app.post("/campgrounds/{campground_id}/comments", status_code=201)
def create_comment(
    campground_id: str,
    form: CommentForm,
    identity: IdentityContext = Depends(require_identity),
    service: CommentService = Depends(get_comment_service)
):
    comment = service.create_comment(campground_id, form, identity.stamp())
    return {
        "message": "Successfully added comment",
        "comment": Comment.from_db(comment),
        "redirect": f"/campgrounds/{campground_id}"
    }


# Comments EDIT - current text for the edit form
@app.get("/campgrounds/{campground_id}/comments/{comment_id}", response_model=Comment)
def edit_comment(
    campground_id: str,
    comment_id: str,
    identity: IdentityContext = Depends(comment_owner),
    service: CommentService = Depends(get_comment_service)
):
    return Comment.from_db(service.get_comment(campground_id, comment_id))


# Comments UPDATE
@app.put("/campgrounds/{campground_id}/comments/{comment_id}")
def update_comment(
    campground_id: str,
    comment_id: str,
    form: CommentForm,
    identity: IdentityContext = Depends(comment_owner),
    service: CommentService = Depends(get_comment_service)
):
    comment = service.update_comment(campground_id, comment_id, form)
    return {
        "message": "Comment updated",
        "comment": Comment.from_db(comment),
        "redirect": f"/campgrounds/{campground_id}"
    }


# Comments DESTROY
@app.delete("/campgrounds/{campground_id}/comments/{comment_id}")
def delete_comment(
    campground_id: str,
    comment_id: str,
    identity: IdentityContext = Depends(comment_owner),
    service: CommentService = Depends(get_comment_service)
):
    service.delete_comment(campground_id, comment_id)
    return {"message": "Comment deleted", "redirect": f"/campgrounds/{campground_id}"}
