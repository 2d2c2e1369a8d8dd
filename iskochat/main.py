import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from iskochat.api.conversations import router as conversations_router
from iskochat.api.presence import router as presence_router
from iskochat.api.removed import router as removed_router
from iskochat.application.exceptions import FeatureDisabledError
from iskochat.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("conversation_id", "message_id", "participant_id", "recipient_id", "count", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="IskoMarket Chat", version="1.0.0")

app.include_router(conversations_router, tags=["conversations"])
app.include_router(presence_router, tags=["presence"])
app.include_router(removed_router, tags=["removed"])


@app.exception_handler(FeatureDisabledError)
async def feature_disabled_handler(request: Request, exc: FeatureDisabledError) -> JSONResponse:
    logging.getLogger(__name__).info("Disabled feature called", extra={"reason": exc.code})
    return JSONResponse(status_code=410, content={"error": exc.code, "message": exc.message})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
