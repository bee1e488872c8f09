from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from prodfind.core.config import settings
from prodfind.core.errors import ProdfindError, prodfind_error_handler
from prodfind.routers import (
    comments,
    moderation,
    notifications,
    products,
    session,
    users,
)

OPENAPI_TAGS = [
    {"name": "Products", "description": "List, create, update and delete products."},
    {"name": "Comments", "description": "Threaded comments on products."},
    {"name": "Notifications", "description": "In-app notifications and removal appeals."},
    {"name": "Admin", "description": "Product moderation and appeal review."},
    {"name": "Session", "description": "Inspect and end the current session."},
    {"name": "Users", "description": "Public user profiles."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Product discovery API. Publish products, bookmark and recommend them, "
        "discuss them in comments, and moderate removals with an appeal flow."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ProdfindError, prodfind_error_handler)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(products.router, prefix="/v1/products", tags=["Products"])
app.include_router(comments.router, prefix="/v1/comments", tags=["Comments"])
app.include_router(
    notifications.router,
    prefix="/v1/notifications",
    tags=["Notifications"],
)
app.include_router(moderation.router, prefix="/v1/admin", tags=["Admin"])
app.include_router(session.router, prefix="/v1/session", tags=["Session"])
app.include_router(users.router, prefix="/v1/users", tags=["Users"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
