from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hydromon.config import cors_origins
from hydromon.routers import (
    readings,
    status,
    alert_settings,
    sync,
)

app = FastAPI(title="Hydroponic Monitor")

origins = cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Route registration
app.include_router(readings.router)
app.include_router(status.router)
app.include_router(alert_settings.router)
app.include_router(sync.router)

@app.get("/health")
def health():
    return {"ok": True}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hydromon.main:app", host="0.0.0.0", port=8000, reload=True)
