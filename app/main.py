from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

# IMPORT ROUTERS
from app.config import get_settings
from app.core.logging import configure_logging
from app.routers.health import router as health_router
from app.routers.applicants import router as applicants_router
from app.routers.applicants import validation_exception_handler
from app.routers.admin_auth import router as admin_auth_router
from app.routers.rankings import router as rankings_router
from app.routers.evaluations import router as evaluations_router
from app.routers.settings import router as settings_router

settings = get_settings()


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Applicants"},
    {"name": "Admin Auth"},
    {"name": "Rankings"},
    {"name": "Evaluations"},
    {"name": "Settings"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)        # Health
app.include_router(applicants_router)    # Applicants
app.include_router(admin_auth_router)    # Admin Auth
app.include_router(rankings_router)      # Rankings
app.include_router(evaluations_router)   # Evaluations
app.include_router(settings_router)      # Settings


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    configure_logging()
    print(f"Starting {settings.APP_NAME} API...")
    print("Swagger UI available at: http://localhost:8000/docs")


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    print(f"Shutting down {settings.APP_NAME} API...")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
