# statement_compare/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from statement_compare.config import get_settings
from statement_compare.logging_config import setup_logging
from statement_compare.routers import health, sessions, clean, reconcile

settings = get_settings()
setup_logging(settings.log_level.upper())

# ============================================
# Create FastAPI app
# ============================================

app = FastAPI(
    title=settings.app_name,
    description="Clean, standardize and compare two account statements",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# ============================================
# CORS middleware
# ============================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# ============================================
# Include routers
# ============================================

app.include_router(health.router, tags=["Health"])
app.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
app.include_router(clean.router, prefix="/sessions", tags=["Cleaning"])
app.include_router(reconcile.router, prefix="/sessions", tags=["Reconciliation"])

# ============================================
# Root endpoint
# ============================================

@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if settings.debug else None,
    }
