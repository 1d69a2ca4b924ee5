"""Chat Auth API — FastAPI application entry point."""

from fastapi import FastAPI

from src.auth.routes import router as auth_router
from src.chats.routes import chats_router, router as chat_router
from src.config.cors import SecurityHeadersMiddleware, configure_cors
from src.config.log_config import configure_logging
from src.config.settings import get_settings
from src.messages.routes import router as messages_router
from src.middleware.error_handler import register_error_handlers
from src.middleware.request_id import RequestIDMiddleware
from src.users.routes import router as users_router

configure_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="Chat Auth API",
    description=(
        "User authentication and AI-backed chat on top of Supabase and an OpenAI-compatible model API.\n\n"
        "## Features\n"
        "- Signup, login, signout and email verification through Supabase Auth\n"
        "- Chat CRUD with ownership enforcement\n"
        "- Assistant replies generated from the recent chat history\n\n"
        "## Authentication\n"
        "Chat and user endpoints require `Authorization: Bearer <token>` with the session token "
        "returned by login or signup."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Auth", "description": "Authentication: login, signup, signout, email verification"},
        {"name": "Chats", "description": "CRUD operations for chats"},
        {"name": "Messages", "description": "Send and list chat messages"},
        {"name": "Users", "description": "User profiles"},
    ],
)

# --- Middleware (last added runs outermost) ---
configure_cors(app)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router)
app.include_router(chat_router)
app.include_router(chats_router)
app.include_router(messages_router)
app.include_router(users_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
