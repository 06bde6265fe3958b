"""FastAPI server exposing the stylist operations."""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from memory.account_store import AccountExistsError, AuthenticationError, ImportFormatError, UnknownAccountError
from stylist_app.app import WardrobeStylistApp
from tools.geocoding import GeocodingError
from tools.lookbook_tools import UnknownOutfitError
from tools.planner_tools import UnknownEventError
from tools.wardrobe_tools import UnknownItemError

_STATUS_CODES = {"error": 400, "busy": 409, "unavailable": 502}


class AccountRequest(BaseModel):
    email: str = Field(..., description="Login email, also the account key")
    password: str = Field(..., min_length=1)
    name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class ImageRequest(BaseModel):
    image: str = Field(..., min_length=1, description="Data URL or base64 payload")


class UploadRequest(ImageRequest):
    name: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    fit: Optional[str] = None
    classification: Optional[str] = None
    style: Optional[str] = None
    material: Optional[str] = None
    auto_classify: bool = True


class WornRequest(BaseModel):
    worn_at: Optional[float] = Field(None, description="Epoch seconds; defaults to now")


class GenerateRequest(BaseModel):
    """Optional context overrides for this request; omitted fields keep the saved context."""

    event: Optional[str] = None
    weather: Optional[str] = None
    location: Optional[str] = None
    vibe: Optional[str] = None
    color: Optional[str] = None
    comfort: Optional[int] = Field(None, ge=1, le=10)
    pinterest_url: Optional[str] = None


class RatingBody(BaseModel):
    comfort: int = Field(3, ge=1, le=5)
    style: int = Field(3, ge=1, le=5)
    notes: str = ""


class SaveOutfitRequest(BaseModel):
    suggestion: Dict[str, Any]
    occasion: str = ""
    rating: Optional[RatingBody] = None


class EventRequest(BaseModel):
    date: date
    title: str
    description: Optional[str] = None
    outfit_id: Optional[str] = None


class LinkRequest(BaseModel):
    outfit_id: Optional[str] = None


class CalendarConnectRequest(BaseModel):
    access_token: Optional[str] = None


class SyncRequest(BaseModel):
    today: Optional[date] = None


def _unwrap(response: Dict[str, Any]) -> Dict[str, Any]:
    status = response.get("status")
    if status != "ok":
        raise HTTPException(status_code=_STATUS_CODES.get(status, 400), detail=response.get("message", "request failed"))
    return response


def create_app(stylist: WardrobeStylistApp | None = None) -> FastAPI:
    """Build the FastAPI app around one :class:`WardrobeStylistApp`."""

    stylist = stylist or WardrobeStylistApp()
    api = FastAPI(title="Wardrobe Stylist", version="0.1.0")
    api.state.stylist = stylist

    def _error_handler(status_code: int):
        async def handler(_: Request, exc: Exception) -> JSONResponse:
            detail = exc.args[0] if exc.args else type(exc).__name__
            return JSONResponse(status_code=status_code, content={"detail": str(detail)})

        return handler

    for exc_type in (UnknownAccountError, UnknownItemError, UnknownOutfitError, UnknownEventError):
        api.add_exception_handler(exc_type, _error_handler(404))
    api.add_exception_handler(AuthenticationError, _error_handler(401))
    api.add_exception_handler(AccountExistsError, _error_handler(409))
    api.add_exception_handler(ImportFormatError, _error_handler(400))
    api.add_exception_handler(ValueError, _error_handler(400))
    api.add_exception_handler(GeocodingError, _error_handler(502))

    @api.get("/healthz")
    def healthcheck() -> dict:
        return {
            "status": "ok",
            "service": "wardrobe-stylist",
            "environment": stylist.config.environment or "local",
            "model": stylist.config.model,
        }

    @api.post("/accounts", status_code=201)
    def register(request: AccountRequest) -> dict:
        return _unwrap(stylist.register(request.email, request.password, request.name))

    @api.post("/sessions")
    def login(request: LoginRequest) -> dict:
        return _unwrap(stylist.login(request.email, request.password))

    @api.get("/accounts/{email}")
    def account_state(email: str) -> dict:
        return _unwrap(stylist.get_state(email))

    @api.get("/accounts/{email}/wardrobe")
    def list_wardrobe(
        email: str,
        category: Optional[str] = None,
        fit: Optional[str] = None,
        classification: Optional[str] = None,
        color: Optional[str] = None,
        style: Optional[str] = None,
    ) -> dict:
        filters = {"category": category, "fit": fit, "classification": classification, "color": color, "style": style}
        return _unwrap(stylist.list_wardrobe(email, filters))

    @api.post("/accounts/{email}/wardrobe", status_code=201)
    def upload_item(email: str, request: UploadRequest) -> dict:
        metadata = request.model_dump(exclude={"image", "auto_classify"}, exclude_none=True)
        return _unwrap(stylist.upload_item(email, request.image, metadata, auto_classify=request.auto_classify))

    @api.delete("/accounts/{email}/wardrobe/{item_id}")
    def remove_item(email: str, item_id: str) -> dict:
        return _unwrap(stylist.remove_item(email, item_id))

    @api.post("/accounts/{email}/wardrobe/{item_id}/worn")
    def log_worn(email: str, item_id: str, request: WornRequest) -> dict:
        return _unwrap(stylist.log_worn(email, item_id, now=request.worn_at))

    @api.post("/accounts/{email}/inspiration", status_code=201)
    def add_inspiration(email: str, request: ImageRequest) -> dict:
        return _unwrap(stylist.add_inspiration(email, request.image))

    @api.delete("/accounts/{email}/inspiration/{image_id}")
    def remove_inspiration(email: str, image_id: str) -> dict:
        return _unwrap(stylist.remove_inspiration(email, image_id))

    @api.patch("/accounts/{email}/profile")
    def update_profile(email: str, updates: Dict[str, Any]) -> dict:
        return _unwrap(stylist.update_profile(email, updates))

    @api.post("/accounts/{email}/profile/analysis")
    def analyze_body(email: str, request: ImageRequest) -> dict:
        return _unwrap(stylist.analyze_body(email, request.image))

    @api.patch("/accounts/{email}/context")
    def update_context(email: str, updates: Dict[str, Any]) -> dict:
        return _unwrap(stylist.update_context(email, updates))

    @api.post("/accounts/{email}/outfits/generate")
    def generate_outfits(email: str, request: GenerateRequest) -> dict:
        return _unwrap(stylist.generate_outfits(email, request.model_dump(exclude_none=True)))

    @api.get("/accounts/{email}/lookbook")
    def lookbook(email: str, occasion: Optional[str] = None) -> dict:
        return _unwrap(stylist.lookbook_view(email, occasion))

    @api.post("/accounts/{email}/lookbook", status_code=201)
    def save_outfit(email: str, request: SaveOutfitRequest) -> dict:
        rating = request.rating.model_dump() if request.rating else None
        return _unwrap(stylist.save_outfit(email, request.suggestion, request.occasion, rating))

    @api.put("/accounts/{email}/lookbook/{outfit_id}/rating")
    def rate_outfit(email: str, outfit_id: str, rating: RatingBody) -> dict:
        return _unwrap(stylist.rate_outfit(email, outfit_id, rating.model_dump()))

    @api.delete("/accounts/{email}/lookbook/{outfit_id}")
    def remove_outfit(email: str, outfit_id: str) -> dict:
        return _unwrap(stylist.remove_outfit(email, outfit_id))

    @api.get("/accounts/{email}/planner")
    def list_events(email: str, start: Optional[date] = None, end: Optional[date] = None) -> dict:
        return _unwrap(stylist.list_events(email, start, end))

    @api.post("/accounts/{email}/planner", status_code=201)
    def add_event(email: str, request: EventRequest) -> dict:
        return _unwrap(
            stylist.add_event(email, request.date, request.title, request.description, request.outfit_id)
        )

    @api.put("/accounts/{email}/planner/{event_id}/outfit")
    def link_outfit(email: str, event_id: str, request: LinkRequest) -> dict:
        return _unwrap(stylist.link_outfit(email, event_id, request.outfit_id))

    @api.delete("/accounts/{email}/planner/{event_id}")
    def remove_event(email: str, event_id: str) -> dict:
        return _unwrap(stylist.remove_event(email, event_id))

    @api.put("/accounts/{email}/calendar")
    def connect_calendar(email: str, request: CalendarConnectRequest) -> dict:
        return _unwrap(stylist.connect_calendar(email, request.access_token))

    @api.post("/accounts/{email}/calendar/sync")
    def sync_calendar(email: str, request: SyncRequest) -> dict:
        return _unwrap(stylist.sync_calendar(email, request.today))

    @api.get("/accounts/{email}/export")
    def export_account(email: str) -> dict:
        return _unwrap(stylist.export_account(email))

    @api.post("/accounts/{email}/import")
    def import_account(email: str, document: Dict[str, Any]) -> dict:
        return _unwrap(stylist.import_account(email, document))

    @api.get("/geocode")
    def geocode(latitude: float, longitude: float) -> dict:
        return _unwrap(stylist.detect_location(latitude, longitude))

    return api


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
