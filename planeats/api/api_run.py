import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from planeats.domain.errors import PlanEatsError
from planeats.events.Event_Bus import EventBus
from planeats.events.notification_observers import NotificationObserver
from planeats.infra.Document_Store import DocumentStore
from planeats.infra.MealPlan_Repository import MealPlanRepository
from planeats.infra.Notification_Repository import NotificationRepository
from planeats.infra.Recipe_Repository import RecipeRepository
from planeats.infra.ShoppingList_Repository import ShoppingListRepository
from planeats.infra.User_Repository import UserRepository
from planeats.logic.ai.service import AIService
from planeats.utilities.config import DATA_DIR, RATE_LIMIT, RATE_LIMIT_STORAGE_URI

# Routers
from planeats.api.routes import users, recipes, mealplans, shopping_lists, notifications
from planeats.api.api_ai import router as ai_router

# Logging
logger = logging.getLogger("planeats_app")


def _validation_details(exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return details


def create_app(store: Optional[DocumentStore] = None, ai_service: Optional[AIService] = None,
               data_dir: Optional[Path] = None, rate_limit: str = RATE_LIMIT,
               rate_limit_storage_uri: str = RATE_LIMIT_STORAGE_URI) -> FastAPI:
    """Build the API with its collaborators; tests pass their own store and AI service."""
    app = FastAPI(title="PlanEats API")

    store = store or DocumentStore(data_dir or DATA_DIR)
    app.state.store = store
    app.state.users = UserRepository(store)
    app.state.recipes = RecipeRepository(store)
    app.state.meal_plans = MealPlanRepository(store)
    app.state.shopping_lists = ShoppingListRepository(store)
    app.state.notifications = NotificationRepository(store)
    app.state.ai_service = ai_service or AIService.from_config()

    app.state.event_bus = EventBus()
    NotificationObserver(app.state.notifications).start(app.state.event_bus)

    # Rate limiter (per client address), scoped to this app
    limiter = Limiter(key_func=get_remote_address, default_limits=[rate_limit],
                      storage_uri=rate_limit_storage_uri)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(PlanEatsError)
    async def _domain_error(request: Request, exc: PlanEatsError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.title, "message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={
            "error": "Validation Error",
            "message": "Invalid input data",
            "details": _validation_details(exc),
        })

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d in %.1fms (ip=%s user=%s)",
            request.method, request.url.path, response.status_code, elapsed_ms,
            request.client.host if request.client else "-",
            getattr(request.state, "user_id", "-"),
        )
        return response

    @app.get("/api/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")}

    # Include routers
    app.include_router(users.router)
    app.include_router(recipes.router)
    app.include_router(ai_router)
    app.include_router(mealplans.router)
    app.include_router(shopping_lists.router)
    app.include_router(notifications.router)

    logger.info("PlanEats API ready (data dir: %s)", store.data_dir)
    return app


app = create_app()
