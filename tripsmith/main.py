import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripsmith.core.config import settings
from tripsmith.services.firebase_service import initialize_firebase
from tripsmith.api.routers import ai, auth, parsing, trips

logging.basicConfig(level=logging.INFO)

@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_firebase()
    yield

app = FastAPI(
    lifespan=lifespan,
    title="Tripsmith API",
    description="Trips, generated packing checklists and activity suggestions.",
    version="0.1.0",
)

# The Vite dev server, plus the deployed frontend when configured.
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/", tags=["Root"])
def read_root():
    """Health check."""
    return {"message": "API is running..."}

# Mount all routers with the /api prefix
app.include_router(auth.router, prefix="/api")
app.include_router(trips.router, prefix="/api")
app.include_router(ai.router, prefix="/api")
app.include_router(parsing.router, prefix="/api")

def run():
    """Serves the app with uvicorn; installed as the `tripsmith` command."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    run()
