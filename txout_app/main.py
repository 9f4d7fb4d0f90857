import logging
from fastapi import FastAPI # type: ignore
from txout_app.api.routes import router as api_router
from txout_app.core.config import settings

logger = logging.getLogger("txout_app")
logger.setLevel(settings.LOG_LEVEL)
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

# Suppress overly verbose logs
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("PyCardano").setLevel(logging.ERROR)


app = FastAPI(title="Transaction Output Builder")
app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}
