import argparse
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import DEFAULT_HOST, DEFAULT_PORT
from .logging_config import get_log_buffer_handler, set_log_level, setup_logging
from .routes import actions_router, sessions_router
from .sessions import SessionService

logger = logging.getLogger('codexmate.api')


class LogLevelRequest(BaseModel):
    level: str


def create_app(service: SessionService | None = None) -> FastAPI:
    """Build the API app around a session service (default roots if None)."""
    app = FastAPI(title="codexmate")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.state.session_service = service if service is not None else SessionService()

    app.include_router(sessions_router)
    app.include_router(actions_router)

    @app.get("/api/health")
    def health():
        """Health check endpoint."""
        roots = app.state.session_service.roots
        return {
            "status": "ok",
            "roots": {fmt.value: str(path) for fmt, path in roots.items()},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/api/logs")
    def get_logs(count: int = 100):
        """Recent log entries from the in-memory buffer."""
        return {"logs": get_log_buffer_handler().get_history(count)}

    @app.post("/api/logs/level")
    def update_log_level(request: LogLevelRequest):
        """Change the log level at runtime."""
        level = set_log_level(request.level)
        return {"level": logging.getLevelName(level)}

    return app


app = create_app()


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    import uvicorn

    setup_logging()
    logger.info("Starting codexmate on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


def main():
    parser = argparse.ArgumentParser(description="codexmate session browser API")
    parser.add_argument('--host', default=DEFAULT_HOST, help='Host to bind to')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT, help='Port to bind to')
    args = parser.parse_args()
    serve(args.host, args.port)


if __name__ == "__main__":
    main()
