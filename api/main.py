import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core import db
from core.log import configure_logging
from posts import repository as posts_repository
from posts import router as posts_router
from posts.cache import SnapshotCache


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One pool and one post cache per process; both live until shutdown.
    pool = await db.init_pool()
    await posts_repository.ensure_schema(pool)
    app.state.post_cache = SnapshotCache()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.include_router(posts_router.router, tags=["posts"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3838")),
    )
