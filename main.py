from fastapi import FastAPI
from dotenv import load_dotenv
import os
import logging
from contextlib import asynccontextmanager
import db_sqlalchemy
from cors import cors_middleware
from models_sql import PasteRepository
from handlers import (
    create_paste_handler, get_paste_handler, update_paste_handler, delete_paste_handler,
    list_pastes_handler, health_handler
)

# load env
load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

PORT = int(os.getenv("SERVER_PORT") or 8080)


def create_app(store: db_sqlalchemy.Store = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # startup
        owned = store or db_sqlalchemy.Store()
        await owned.connect()
        app.state.repository = PasteRepository(owned.database)
        try:
            yield
        finally:
            # shutdown
            await owned.disconnect()

    app = FastAPI(title="Paste Backend", lifespan=lifespan)
    app.middleware("http")(cors_middleware)

    # Collection path
    app.get("/pastes")(list_pastes_handler)
    app.post("/pastes")(create_paste_handler)

    # Single paste, addressed by ?id=
    app.get("/paste")(get_paste_handler)
    app.put("/paste")(update_paste_handler)
    app.delete("/paste")(delete_paste_handler)

    app.get("/health")(health_handler)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logger.info("server starting on port %s", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
