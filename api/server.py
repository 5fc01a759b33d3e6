"""Local stand-in for the TryItOn backend.

Implements the endpoints the app and share extension call, keeping
everything in memory:
- POST /users/ and /users/subscription/ for account registration
- /templates/ and /results/ for the user's photos and generated images
- /tryon/url/ and /tryon/upload/ for try-on requests
"""

import uuid
from dataclasses import dataclass, field

from fastapi import FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel


class UserRequest(BaseModel):
    """Request body for user registration."""
    username: str
    is_pro: bool = False
    auth_provider: str = "custom"
    email: str | None = None


class SubscriptionRequest(BaseModel):
    """Request body for an entitlement change."""
    is_pro: bool
    expiration_date: str | None = None  # ISO-8601


@dataclass
class BackendState:
    users: dict[str, dict] = field(default_factory=dict)
    templates: dict[str, list[dict]] = field(default_factory=dict)
    results: dict[str, list[dict]] = field(default_factory=dict)
    next_id: int = 1

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value


def create_app() -> FastAPI:
    """Build a backend with fresh in-memory state."""
    app = FastAPI(
        title="TryItOn mock API",
        description="In-memory stand-in for the TryItOn backend",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    state = BackendState()
    app.state.backend = state

    def require_user(username: str | None) -> str:
        if not username or username not in state.users:
            raise HTTPException(status_code=401, detail="Unknown user")
        return username

    def add_results(username: str, category: str, source: str | None = None) -> dict:
        result = {
            "id": state.new_id(),
            "filename": f"result_{uuid.uuid4().hex[:8]}.png",
            "item_category": category,
            "source_url": source,
        }
        state.results.setdefault(username, []).append(result)
        return {
            "result_ids": [result["id"]],
            "result_urls": [f"/images/results/{result['filename']}"],
        }

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "TryItOn mock API", "version": "1.0.0"}

    @app.post("/users/")
    async def create_user(request: UserRequest):
        state.users[request.username] = request.model_dump()
        return state.users[request.username]

    @app.post("/users/subscription/")
    async def update_subscription(
        request: SubscriptionRequest,
        username: str | None = Header(default=None),
    ):
        user = state.users[require_user(username)]
        user["is_pro"] = request.is_pro
        user["expiration_date"] = request.expiration_date
        return user

    @app.get("/templates/")
    async def list_templates(username: str | None = Header(default=None)):
        return state.templates.get(require_user(username), [])

    @app.post("/templates/")
    async def upload_template(
        file: UploadFile = File(...),
        category: str = Form("general"),
        username: str | None = Header(default=None),
    ):
        owner = require_user(username)
        await file.read()
        template = {
            "id": state.new_id(),
            "filename": f"template_{uuid.uuid4().hex[:8]}.jpg",
            "category": category,
        }
        state.templates.setdefault(owner, []).append(template)
        return template

    @app.get("/results/")
    async def list_results(username: str | None = Header(default=None)):
        return state.results.get(require_user(username), [])

    @app.post("/tryon/url/")
    async def tryon_url(url: str = Form(...), username: str | None = Header(default=None)):
        return add_results(require_user(username), "general", source=url)

    @app.post("/tryon/upload/")
    async def tryon_upload(
        file: UploadFile = File(...),
        username: str | None = Header(default=None),
    ):
        owner = require_user(username)
        await file.read()
        return add_results(owner, "general")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
