# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from .catalog.router import router as catalog_router
from .config import get_settings
from .dependencies import get_current_user_id, get_storage
from .errors import AuthenticationError, NotFoundError, register_error_handlers
from .models import CreateUserRequest, LoginRequest, PublicUser, UpdateUserRequest
from .shop.router import router as shop_router
from .storage import MemStorage, load_sample_data


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(level=logging.getLevelName(level.upper()), format=LOG_FORMAT, force=True)


def build_storage() -> MemStorage:
    settings = get_settings()
    store = MemStorage()
    if settings.load_sample_data:
        load_sample_data(store, settings.sample_data_path)
    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    app.state.storage = build_storage()
    logger.info("Storefront API started")
    yield
    logger.info("Storefront API shutting down")


settings = get_settings()

app = FastAPI(
    title=settings.app_title,
    description=(
        "Storefront backend: product catalog with filtering, sorting and "
        "pagination, cart, wishlist, checkout and user profile, backed by "
        "an in-memory record store."
    ),
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)
app.include_router(catalog_router)
app.include_router(shop_router)


@app.get("/")
def health_check():
    return {"status": "ok", "message": "Storefront API live"}


# === Account (mock auth) ===

@app.get("/api/auth/me", response_model=PublicUser)
def current_user(
    store: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    user = store.get_user(user_id)
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user.public()


@app.post("/api/auth/login", response_model=PublicUser)
def login(req: LoginRequest, store: MemStorage = Depends(get_storage)):
    user = store.get_user_by_username(req.username)
    if user is None or user.password != req.password:
        raise AuthenticationError("Invalid credentials")
    return user.public()


@app.post("/api/auth/register", response_model=PublicUser, status_code=status.HTTP_201_CREATED)
def register(req: CreateUserRequest, store: MemStorage = Depends(get_storage)):
    return store.create_user(req).public()


@app.put("/api/users/{user_id}", response_model=PublicUser)
def update_user(user_id: int, req: UpdateUserRequest, store: MemStorage = Depends(get_storage)):
    # TODO: only let the logged-in user edit their own profile once real auth exists.
    user = store.update_user(user_id, req)
    if user is None:
        raise NotFoundError("User not found")
    return user.public()
