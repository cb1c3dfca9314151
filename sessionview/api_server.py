"""HTTP API over stored Claude Code sessions.

Read-only: lists a workspace's sessions and plans and serves reconstructed
transcripts for display clients.
"""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query

from sessionview import __version__
from sessionview.api_models import HealthDTO, MessageDTO, PlanDTO, SessionEntryDTO, SessionMessagesDTO
from sessionview.config import AppConfig
from sessionview.sessions import (
    InvalidSessionIdError,
    SessionStoreError,
    list_plans,
    list_sessions,
    load_session_messages,
)

logger = logging.getLogger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI application bound to ``config``."""
    app = FastAPI(title="sessionview API", version=__version__)
    claude_home = config.claude_home_path()

    @app.get("/health")
    async def health() -> HealthDTO:  # pyright: ignore
        return HealthDTO()

    @app.get("/sessions")
    async def get_sessions(  # pyright: ignore
        workspace: str = Query(..., min_length=1, description="Absolute workspace path"),
        limit: Optional[int] = Query(None, ge=1, description="Maximum number of sessions"),
    ) -> list[SessionEntryDTO]:
        """List a workspace's sessions, most recently modified first."""
        try:
            entries = list_sessions(
                workspace,
                claude_home=claude_home,
                limit=limit if limit is not None else config.sessions.limit,
            )
        except SessionStoreError as e:
            logger.error("list_sessions failed (workspace=%s): %s", workspace, e)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return [SessionEntryDTO.from_core(entry) for entry in entries]

    @app.get("/sessions/{session_id}/messages")
    async def get_session_messages(  # pyright: ignore
        session_id: str,
        workspace: str = Query(..., min_length=1, description="Absolute workspace path"),
    ) -> SessionMessagesDTO:
        """Get the reconstructed transcript of a stored session."""
        try:
            messages = load_session_messages(workspace, session_id, claude_home=claude_home)
        except InvalidSessionIdError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except SessionStoreError as e:
            logger.error("get_session_messages failed (session=%s): %s", session_id, e)
            raise HTTPException(status_code=500, detail=str(e)) from e

        return SessionMessagesDTO(
            session_id=session_id,
            messages=[MessageDTO.from_core(message) for message in messages],
        )

    @app.get("/plans")
    async def get_plans() -> list[PlanDTO]:  # pyright: ignore
        """List plan documents, newest first."""
        return [PlanDTO.from_core(plan) for plan in list_plans(config.plans_path())]

    return app


def run_server(config: AppConfig, *, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn until interrupted."""
    bind_host = host or config.api.host
    bind_port = port or config.api.port
    logger.info("Starting API server on %s:%d", bind_host, bind_port)
    uvicorn.run(create_app(config), host=bind_host, port=bind_port, log_config=None)
