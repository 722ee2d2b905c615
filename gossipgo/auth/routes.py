"""Auth endpoints: register, login, logout."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from gossipgo.auth import service
from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.utils.envelope import ok

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# --- Request schemas ---

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1, description="User id or email")
    password: str


# --- Endpoints ---

@router.post("/register", status_code=201, summary="Register a new user", description="Create an account and return the user with a bearer token.")
async def register(body: RegisterRequest, store: InMemoryStore = Depends(get_store)):
    session = service.register(store, body.name, body.email, body.password)
    return ok(session)


@router.post("/login", summary="Login", description="Authenticate with a user id or email and a password.")
async def login(body: LoginRequest, store: InMemoryStore = Depends(get_store)):
    session = service.login(store, body.identifier, body.password)
    return ok(session)


@router.post("/logout", summary="Logout", description="Revoke the bearer token used for this request.")
async def logout(user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    service.revoke(store, user.token_id)
    return ok({"message": "Logged out successfully"})
