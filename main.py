from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socket

import uvicorn

from lavender.api.media_routes import router as media_router
from lavender.config import load_config


app = FastAPI(title="Lavender Media API", version="1.0.0")
app.state.config = None

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r".*",
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

app.include_router(media_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.on_event("startup")
def _load_config():
    # already set when launched through __main__ or by tests
    if app.state.config is not None:
        return
    config = load_config()
    app.state.config = config
    print(f"[startup] media root: {config.media_root}")
    if not config.media_root.is_dir():
        print(f"[startup] media root is not a directory yet: {config.media_root}")
    if not config.api_hash:
        print("[startup] no api_hash configured (set LAVENDER_API_HASH); every keyed request will be rejected")


def _get_local_ip() -> str:
    """Best-effort LAN IPv4; falls back to hostname resolution or 127.0.0.1."""
    ip = "127.0.0.1"
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            # no packet is sent, this only picks the outbound interface
            s.connect(("8.8.8.8", 80))
            ip = s.getsockname()[0]
        finally:
            s.close()
    except OSError:
        try:
            ip = socket.gethostbyname(socket.gethostname())
        except OSError:
            pass
    return ip


if __name__ == "__main__":
    config = load_config()
    app.state.config = config
    print(f"[boot] Lavender starting: http://{_get_local_ip()}:{config.port}  (local: http://localhost:{config.port})")
    uvicorn.run(app, host=config.host, port=config.port)
