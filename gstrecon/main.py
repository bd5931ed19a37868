import logging
from fastapi import FastAPI
from gstrecon.core.config import settings
from gstrecon.core.middleware import AuditMiddleware
from gstrecon.api import health, reconcile, gstr3b, validation

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.PROJECT_NAME)
app.add_middleware(AuditMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(reconcile.router)
app.include_router(gstr3b.router)
app.include_router(validation.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
