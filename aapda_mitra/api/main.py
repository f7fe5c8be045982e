"""FastAPI application for the Aapda Mitra mock backend."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from aapda_mitra.assistant import ChatMessage, ChatSession, ClaudeOracle, TextOracle
from aapda_mitra.database import Database
from aapda_mitra.errors import GenerationError
from aapda_mitra.mesh import MeshSimulator
from aapda_mitra.offline import (
    AlertFeed,
    ContactBook,
    GuideLibrary,
    NATIONAL_HELPLINES,
    ProfileManager,
    ShelterDirectory,
    seed_offline_data,
)
from aapda_mitra.utils.notifications import NotificationCenter
from .auth import AuthOutcome, UserRegistry

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = "Local store unavailable"


@dataclass
class AppServices:
    """Everything the endpoints need, built once at startup."""
    db: Database
    notifications: NotificationCenter
    users: UserRegistry
    alerts: AlertFeed
    contacts: ContactBook
    profile: ProfileManager
    shelters: ShelterDirectory
    guides: GuideLibrary
    oracle: TextOracle
    mesh: MeshSimulator

    @classmethod
    def build(
        cls,
        db: Database,
        oracle: TextOracle,
        mesh: MeshSimulator,
        notifications: NotificationCenter | None = None,
    ) -> "AppServices":
        if notifications is None:
            notifications = NotificationCenter()
        return cls(
            db=db,
            notifications=notifications,
            users=UserRegistry(),
            alerts=AlertFeed(db, notifications),
            contacts=ContactBook(db, notifications),
            profile=ProfileManager(db, notifications),
            shelters=ShelterDirectory(db, notifications),
            guides=GuideLibrary(db, oracle),
            oracle=oracle,
            mesh=mesh,
        )


# Request/Response models
class SignupRequest(BaseModel):
    """Missing fields are reported as 400, not as validation errors."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SigninRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None


class ContactRequest(BaseModel):
    name: str
    number: str


class IncidentRequest(BaseModel):
    description: str
    image: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class ChatLine(BaseModel):
    sender: str
    text: str


class ChatRequest(BaseModel):
    message: str
    history: list[ChatLine] = []


class MeshToggleRequest(BaseModel):
    enabled: bool


class MeshSendRequest(BaseModel):
    message: str


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def _auth_response(outcome: AuthOutcome) -> JSONResponse:
    responses = {
        AuthOutcome.CREATED: (201, True, "Signed up successfully."),
        AuthOutcome.SIGNED_IN: (200, True, "Signed in successfully."),
        AuthOutcome.DUPLICATE_EMAIL: (409, False, "User with this email already exists."),
        AuthOutcome.INVALID_CREDENTIALS: (401, False, "Invalid email or password."),
    }
    status, success, message = responses.get(
        outcome, (400, False, "Please fill in all required fields.")
    )
    return JSONResponse(status_code=status, content={"success": success, "message": message})


def create_app(
    database: Database | None = None,
    oracle: TextOracle | None = None,
    simulator: MeshSimulator | None = None,
    notifications: NotificationCenter | None = None,
) -> FastAPI:
    """
    Build the API.

    The store, oracle and simulator are created once when the app starts
    (or injected) and shared by every request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database()
        db.create_tables()
        seeded = seed_offline_data(db)
        logger.info("Offline store ready (seeded: %s)", seeded)

        app.state.services = AppServices.build(
            db,
            oracle or ClaudeOracle(),
            simulator or MeshSimulator(),
            notifications,
        )
        yield
        app.state.services.mesh.disable()
        db.close()

    app = FastAPI(
        title="Aapda Mitra",
        description="Offline-first disaster preparedness backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {"name": "Aapda Mitra", "version": "1.0.0", "docs": "/docs"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}

    # Auth
    @app.post("/api/auth/signup")
    async def signup(request: SignupRequest, services: AppServices = Depends(get_services)):
        return _auth_response(
            services.users.sign_up(request.name, request.email, request.password)
        )

    @app.post("/api/auth/signin")
    async def signin(request: SigninRequest, services: AppServices = Depends(get_services)):
        return _auth_response(services.users.sign_in(request.email, request.password))

    # Profile
    @app.get("/api/profile")
    async def get_profile(services: AppServices = Depends(get_services)):
        profile = services.profile.load()
        if profile is None:
            raise HTTPException(503, STORE_UNAVAILABLE)
        return profile

    @app.put("/api/profile")
    async def update_profile(
        request: ProfileUpdate,
        services: AppServices = Depends(get_services),
    ):
        current = services.profile.load()
        if current is None:
            raise HTTPException(503, STORE_UNAVAILABLE)

        changes = {k: v for k, v in request.model_dump().items() if v is not None}
        try:
            profile = services.profile.save({**current, **changes})
        except ValueError as e:
            raise HTTPException(400, str(e))
        if profile is None:
            raise HTTPException(503, STORE_UNAVAILABLE)
        return {"success": True, "profile": profile}

    # Contacts
    @app.get("/api/contacts")
    async def list_contacts(services: AppServices = Depends(get_services)):
        return {
            "helplines": NATIONAL_HELPLINES,
            "contacts": services.contacts.list(),
        }

    @app.post("/api/contacts", status_code=201)
    async def add_contact(request: ContactRequest, services: AppServices = Depends(get_services)):
        try:
            contact = services.contacts.add(request.name, request.number)
        except ValueError as e:
            raise HTTPException(400, str(e))
        if contact is None:
            raise HTTPException(503, STORE_UNAVAILABLE)
        return contact

    @app.delete("/api/contacts/{contact_id}", status_code=204)
    async def delete_contact(contact_id: int, services: AppServices = Depends(get_services)):
        if not services.contacts.delete(contact_id):
            raise HTTPException(503, STORE_UNAVAILABLE)
        return Response(status_code=204)

    # Alerts and incidents
    @app.get("/api/alerts")
    async def list_alerts(services: AppServices = Depends(get_services)):
        alerts = services.alerts.load()
        return {"count": len(alerts), "alerts": alerts}

    @app.post("/api/incidents", status_code=201)
    async def report_incident(
        request: IncidentRequest,
        services: AppServices = Depends(get_services),
    ):
        try:
            alert = services.alerts.report_incident(
                request.description, image=request.image, lat=request.lat, lon=request.lon
            )
        except ValueError as e:
            raise HTTPException(400, str(e))
        if alert is None:
            raise HTTPException(503, STORE_UNAVAILABLE)
        return {"success": True, "message": "Incident reported.", "alert": alert}

    # Shelters
    @app.get("/api/shelters")
    async def list_shelters(
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        limit: Optional[int] = None,
        services: AppServices = Depends(get_services),
    ):
        """
        List shelters from the local store.

        Query parameters:
            - lat, lng: sort by distance from this point
            - limit: maximum shelters to return when sorting by distance
        """
        if lat is not None and lng is not None:
            shelters = services.shelters.nearest(lat, lng, limit)
        else:
            shelters = services.shelters.list()
        return {"count": len(shelters), "shelters": shelters}

    # Survival guides
    @app.get("/api/guides/{disaster_type}")
    async def get_guide(
        disaster_type: str,
        refresh: bool = False,
        services: AppServices = Depends(get_services),
    ):
        try:
            if refresh:
                result = services.guides.refresh(disaster_type)
            else:
                result = services.guides.fetch(disaster_type)
        except ValueError:
            raise HTTPException(400, f"Unknown disaster type: {disaster_type}")
        except GenerationError as e:
            raise HTTPException(503, str(e))
        return result.to_dict()

    # Chat
    @app.post("/api/chat")
    async def chat(request: ChatRequest, services: AppServices = Depends(get_services)):
        try:
            history = [ChatMessage.from_dict(line.model_dump()) for line in request.history]
        except ValueError as e:
            raise HTTPException(400, f"Invalid chat history: {e}")

        session = ChatSession(services.oracle, history=history)
        reply = session.send(request.message)
        if reply is None:
            raise HTTPException(400, "Message must not be empty.")
        return {"reply": reply.to_dict(), **session.to_dict()}

    @app.get("/api/notifications")
    async def list_notifications(services: AppServices = Depends(get_services)):
        return {"notifications": [n.to_dict() for n in services.notifications.active()]}

    # Mesh simulation
    @app.get("/api/mesh")
    async def mesh_status(services: AppServices = Depends(get_services)):
        return services.mesh.snapshot()

    @app.post("/api/mesh/toggle")
    async def mesh_toggle(
        request: MeshToggleRequest,
        background_tasks: BackgroundTasks,
        services: AppServices = Depends(get_services),
    ):
        if request.enabled:
            if services.mesh.activate():
                background_tasks.add_task(services.mesh.discover)
        else:
            services.mesh.disable()
        return services.mesh.snapshot()

    @app.post("/api/mesh/send", status_code=202)
    async def mesh_send(
        request: MeshSendRequest,
        background_tasks: BackgroundTasks,
        services: AppServices = Depends(get_services),
    ):
        if not services.mesh.can_send(request.message):
            raise HTTPException(409, "Simulation is not ready to send.")

        async def send_and_notify():
            result = await services.mesh.send_sos(request.message)
            if result is None or result.cancelled:
                return
            if result.delivered:
                services.notifications.success("SOS delivered via mesh network.")
            else:
                services.notifications.error("No online gateway found nearby.")

        background_tasks.add_task(send_and_notify)
        return {"accepted": True, **services.mesh.snapshot()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from aapda_mitra.config import API_HOST, API_PORT

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%H:%M:%S",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)
