from fastapi import FastAPI
from routebuilder.api import routes
from routebuilder.core.config import settings
from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title="Route Builder API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(routes.router)

@app.get("/")
def read_root():
    return {
        "message": "Route Builder API is running.",
        "status": "healthy",
        "version": "0.1.0"
    }
