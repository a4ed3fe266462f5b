from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal

import config

Action = Literal["create", "update", "delete"]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- workspace ---


class Project(CamelModel):
    id: str
    name: str
    description: Optional[str] = None


class ProjectCreate(CamelModel):
    name: str
    description: Optional[str] = None


class FileCreate(CamelModel):
    project_id: str
    name: str
    path: str
    content: str = ""
    language: str = "javascript"


class File(FileCreate):
    id: str


class FileUpdate(CamelModel):
    content: str


class ExecuteRequest(CamelModel):
    code: str
    language: str


class ExecuteResponse(CamelModel):
    success: bool
    output: str


# --- ai chat ---


class ChangeRecord(CamelModel):
    file_id: Optional[str] = None
    file_name: str
    new_content: str
    action: Action


class OpenFile(CamelModel):
    id: str
    name: str
    content: str
    language: str


class SnapshotFile(CamelModel):
    id: str
    name: str
    path: str = ""
    content: str
    language: str


class HistoryMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str
    code_changes: Optional[List[ChangeRecord]] = None
    suggestion: Optional[str] = None


class AiChatRequest(CamelModel):
    message: str = Field(min_length=1)
    project_id: str
    current_file: Optional[OpenFile] = None
    all_files: Optional[List[SnapshotFile]] = None
    conversation_history: Optional[List[HistoryMessage]] = None


class AiChatResponse(CamelModel):
    explanation: str
    code_changes: List[ChangeRecord] = Field(default_factory=list)
    suggestion: Optional[str] = None


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str
    code_changes: Optional[List[ChangeRecord]] = None
    suggestion: Optional[str] = None
    timestamp: str


# --- reconciliation ---


class Mutation(CamelModel):
    op: Action
    file_name: str
    file_id: Optional[str] = None
    content: Optional[str] = None
    language: Optional[str] = None


class ApplyRequest(CamelModel):
    project_id: str = config.DEFAULT_PROJECT_ID
    code_changes: List[ChangeRecord] = Field(default_factory=list)


class ApplyResponse(CamelModel):
    applied: List[Mutation] = Field(default_factory=list)
    failed: Optional[ChangeRecord] = None
    error: Optional[str] = None
    files: List[File] = Field(default_factory=list)


# --- server-side chat sessions ---


class StartSessionRequest(CamelModel):
    project_id: str = config.DEFAULT_PROJECT_ID


class StartSessionResponse(CamelModel):
    session_id: str
    message: str


class SessionMessageRequest(CamelModel):
    message: str = Field(min_length=1)
    current_file_id: Optional[str] = None


class SessionStatusResponse(CamelModel):
    session_id: str
    project_id: str
    messages: List[ChatMessage]
    created_at: str
    updated_at: str


class SessionTurnResponse(CamelModel):
    message: ChatMessage
    applied: List[Mutation] = Field(default_factory=list)
    failed: Optional[ChangeRecord] = None
    error: Optional[str] = None
