"""Server-side chat sessions that drive the model and apply its changes"""

import asyncio
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from fastapi.concurrency import run_in_threadpool

from src import llm
from src.chat import ChatSession
from src.db import MemoryStore
from src.logger import get_logger
from src.models import ChatMessage, OpenFile, SnapshotFile
from src.prompt import build_user_prompt
from src.reconciler import ReconcileResult, Reconciler

logger = get_logger(__name__)


@dataclass
class ProcessingResult:
    """Result of processing a user request"""

    status: str  # "success" or "error"
    message: ChatMessage
    reconcile: ReconcileResult = field(default_factory=ReconcileResult)


class AgentSession:
    """One conversation about one project"""

    def __init__(
        self,
        session_id: str,
        project_id: str,
        store: MemoryStore,
        client: llm.LLMClient,
    ):
        self.session_id = session_id
        self.project_id = project_id
        self.store = store
        self.client = client
        self.chat = ChatSession()
        self.created_at = datetime.now().isoformat()
        self.updated_at = self.created_at
        self._lock = asyncio.Lock()

    def _snapshot(self, current_file_id: Optional[str]):
        files = self.store.list(self.project_id)
        snapshot = [
            SnapshotFile(
                id=f.id, name=f.name, path=f.path, content=f.content, language=f.language
            )
            for f in files
        ]
        current_file = None
        for f in files:
            if f.id == current_file_id:
                current_file = OpenFile(
                    id=f.id, name=f.name, content=f.content, language=f.language
                )
                break
        return snapshot, current_file

    async def process_user_request(
        self, message: str, current_file_id: Optional[str] = None
    ) -> ProcessingResult:
        """Send one user turn to the model and apply the returned changes"""
        async with self._lock:
            logger.info(f"Processing user request for session: {self.session_id}")

            snapshot, current_file = self._snapshot(current_file_id)
            user_prompt = build_user_prompt(message, snapshot, current_file)
            messages = llm.build_messages(self.chat, user_prompt)
            self.chat.add_user_message(message)
            self.updated_at = datetime.now().isoformat()

            try:
                response = await run_in_threadpool(llm.forward, self.client, messages)
            except Exception as e:
                logger.error(
                    f"Session {self.session_id}: LLM error: {str(e)}", exc_info=True
                )
                # error turns stay out of the transcript
                reply = ChatMessage(
                    role="assistant",
                    content=f"Error: {str(e)}",
                    timestamp=datetime.now().isoformat(),
                )
                return ProcessingResult(
                    status="error",
                    message=reply,
                    reconcile=ReconcileResult(error=str(e)),
                )

            reply = self.chat.add_assistant_message(
                response.explanation,
                code_changes=response.code_changes,
                suggestion=response.suggestion,
            )
            result = Reconciler(self.store, self.project_id).apply(response.code_changes)
            self.updated_at = datetime.now().isoformat()

            if not result.ok:
                logger.warning(
                    f"Session {self.session_id}: partial apply, stopped at {result.failed.file_name}"
                )

            return ProcessingResult(status="success", message=reply, reconcile=result)


class SessionRegistry:
    """In-memory registry of agent sessions"""

    def __init__(self, store: MemoryStore, client: llm.LLMClient):
        self.store = store
        self.client = client
        self._sessions: Dict[str, AgentSession] = {}
        self._lock = threading.Lock()

    def create(self, project_id: str) -> AgentSession:
        session = AgentSession(str(uuid.uuid4()), project_id, self.store, self.client)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Created agent session {session.session_id} for {project_id}")
        return session

    def get(self, session_id: str) -> Optional[AgentSession]:
        with self._lock:
            return self._sessions.get(session_id)
