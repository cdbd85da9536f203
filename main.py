import logging
import os

from fastapi import FastAPI

from entities_router import router as entities_router

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Entity Catalog Admin")
app.include_router(entities_router)
