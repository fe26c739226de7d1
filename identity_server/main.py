"""
Identity server application. Migrates and seeds all databases on startup.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from identity_server.admin import router as admin_router
from identity_server.seed import seed_database


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Migrate databases and seed default roles, users, clients and sample data."""
    seed_database()
    yield


app = FastAPI(title="Identity Server", version="1.0.0", lifespan=lifespan)
app.include_router(admin_router, tags=["admin"])


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "identity_server"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "identity_server.main:app",
        host="127.0.0.1",
        port=9000,
        reload=True,
    )
