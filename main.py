"""Main application file - OEE Tracker"""
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import routers
from api_routes import router as api_router
from auth_api import router as auth_router
from entry_api import router as entry_router

# Initialize FastAPI app
app = FastAPI(title="OEE Tracker", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in os.getenv('CORS_ORIGINS', '').split(',') if o],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, tags=["auth"])
app.include_router(entry_router, tags=["entries"])
app.include_router(api_router, tags=["api"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv('PORT', '8000')),
        reload=False,
        log_level="info"
    )
