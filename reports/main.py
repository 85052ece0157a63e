"""Main FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reports.database import engine, Base
from reports.api.routes import router
from reports.logging_config import setup_logging
# Import models to register them with SQLAlchemy Base
from reports.models.domain import Employee, Task
from reports.models.audit import Modification, Comment

setup_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Reports - Task Tracking",
    description="Task lifecycle engine where every edit is gated by the task's state and the employee's role.",
    version="0.1.0"
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For MVP - restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api", tags=["Reports"])


# Health check
@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "Reports"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
