# ========================================
# jobportal/main.py
# ========================================

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobportal.config import CORS_ORIGINS, configure_logging
from jobportal.database import connect_to_mongo, close_mongo_connection
from jobportal.utils.errors import register_error_handlers

# ===========================
# IMPORT ALL ROUTERS
# ===========================

from jobportal.routes.auth import router as auth_router
from jobportal.routes.user import router as user_router
from jobportal.routes.job import router as job_router
from jobportal.routes.application import router as application_router
from jobportal.routes.admin import router as admin_router

API_PREFIX = "/api/v1"

configure_logging()

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="Job Portal API",
    description="Job postings, applications and resume uploads for applicants, recruiters and admins",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ===========================
# CORS MIDDLEWARE
# ===========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "PUT", "PATCH"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Connect to MongoDB on startup"""
    await connect_to_mongo()


@app.on_event("shutdown")
async def stop_db():
    """Close MongoDB connection on shutdown"""
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(user_router, prefix=API_PREFIX)
app.include_router(job_router, prefix=API_PREFIX)
app.include_router(application_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    return {
        "status": "Job Portal API Running",
        "version": "1.0.0",
        "documentation": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": "1.0.0"}
