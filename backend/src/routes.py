# --- include all imports here ---
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse

from src import llm
from src.agent import SessionRegistry
from src.chat import ChatSession
from src.db import MemoryStore
from src.logger import get_logger
from src.models import (
    AiChatRequest,
    AiChatResponse,
    ApplyRequest,
    ApplyResponse,
    ExecuteRequest,
    ExecuteResponse,
    File,
    FileCreate,
    FileUpdate,
    Project,
    SessionMessageRequest,
    SessionStatusResponse,
    SessionTurnResponse,
    StartSessionRequest,
    StartSessionResponse,
)
from src.preview import compose_preview
from src.prompt import build_user_prompt
from src.reconciler import reconcile

logger = get_logger(__name__)


router = APIRouter()


# --- dependencies: one store, client and session registry per app ---


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_llm(request: Request) -> llm.LLMClient:
    return request.app.state.llm


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


@router.get("/health")
def health_check(client: llm.LLMClient = Depends(get_llm)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "message": "CodeStudio API is running",
        "ai_configured": client.configured,
    }


# --- ai ---


@router.post(
    "/api/ai/chat", response_model=AiChatResponse, response_model_exclude_none=True
)
async def ai_chat(request: AiChatRequest, client: llm.LLMClient = Depends(get_llm)):
    """Ask the model for code changes; the client applies them"""
    try:
        logger.info(f"AI chat request for project: {request.project_id}")
        session = ChatSession.from_history(request.conversation_history)
        user_prompt = build_user_prompt(
            request.message, request.all_files, request.current_file
        )
        messages = llm.build_messages(session, user_prompt)
        return await run_in_threadpool(llm.forward, client, messages)

    except Exception as e:
        logger.error(f"AI chat error: {str(e)}", exc_info=True)
        body = AiChatResponse(explanation=str(e) or "An error occurred")
        return JSONResponse(
            status_code=500,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )


@router.post("/api/ai/sessions", response_model=StartSessionResponse)
def start_session(
    request: StartSessionRequest, sessions: SessionRegistry = Depends(get_sessions)
):
    """Create a server-side chat session bound to a project"""
    session = sessions.create(request.project_id)
    return StartSessionResponse(
        session_id=session.session_id, message="Chat session created."
    )


@router.get("/api/ai/sessions/{session_id}", response_model=SessionStatusResponse)
def get_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    """Transcript of an existing session"""
    session = sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionStatusResponse(
        session_id=session.session_id,
        project_id=session.project_id,
        messages=session.chat.messages,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


@router.post(
    "/api/ai/sessions/{session_id}/messages",
    response_model=SessionTurnResponse,
    response_model_exclude_none=True,
)
async def send_session_message(
    session_id: str,
    request: SessionMessageRequest,
    sessions: SessionRegistry = Depends(get_sessions),
):
    """Run one chat turn and apply the model's changes to the store"""
    session = sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    result = await session.process_user_request(
        request.message, request.current_file_id
    )
    body = SessionTurnResponse(
        message=result.message,
        applied=result.reconcile.applied,
        failed=result.reconcile.failed,
        error=result.reconcile.error,
    )
    if result.status == "error":
        return JSONResponse(
            status_code=500,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )
    return body


# --- workspace ---


@router.get("/api/projects/{project_id}", response_model=Project)
def get_project(project_id: str, store: MemoryStore = Depends(get_store)):
    project = store.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/api/workspace/files/{project_id}", response_model=List[File])
def list_files(project_id: str, store: MemoryStore = Depends(get_store)):
    """Get all files for a project"""
    return store.list(project_id)


@router.post("/api/workspace/files", response_model=File)
def create_file(record: FileCreate, store: MemoryStore = Depends(get_store)):
    file = store.create(record)
    logger.info(f"Created file {file.name} in project {file.project_id}")
    return file


@router.patch("/api/workspace/files/{file_id}", response_model=File)
def update_file(
    file_id: str, update: FileUpdate, store: MemoryStore = Depends(get_store)
):
    file = store.update(file_id, update.content)
    if not file:
        return JSONResponse(status_code=404, content={"error": "File not found"})
    return file


@router.delete("/api/workspace/files/{file_id}")
def delete_file(file_id: str, store: MemoryStore = Depends(get_store)):
    if not store.delete(file_id):
        return JSONResponse(status_code=404, content={"error": "File not found"})
    return {"success": True}


@router.post(
    "/api/workspace/apply", response_model=ApplyResponse, response_model_exclude_none=True
)
def apply_changes(request: ApplyRequest, store: MemoryStore = Depends(get_store)):
    """Reconcile code changes into a project; partial failures are in the body"""
    result = reconcile(store, request.project_id, request.code_changes)
    return ApplyResponse(
        applied=result.applied,
        failed=result.failed,
        error=result.error,
        files=store.list(request.project_id),
    )


@router.get("/api/workspace/preview/{project_id}", response_class=HTMLResponse)
def preview(project_id: str, store: MemoryStore = Depends(get_store)):
    return compose_preview(store.list(project_id))


@router.post("/api/workspace/execute", response_model=ExecuteResponse)
def execute_code(request: ExecuteRequest):
    """Execution happens in the browser preview; this only acknowledges"""
    logger.debug(f"Execute requested for {request.language} ({len(request.code)} chars)")
    return ExecuteResponse(
        success=True, output="Code execution is handled in the browser preview"
    )
