# Simple in-memory store for projects and their files
import threading
import uuid
from typing import Dict, List, Optional

import config
from src.logger import get_logger
from src.models import File, FileCreate, Project, ProjectCreate

logger = get_logger(__name__)


WELCOME_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>CodeStudio</title>
</head>
<body>
  <main class="container">
    <h1>Welcome to CodeStudio</h1>
    <p>Edit these files or ask the assistant to build something.</p>
    <button id="greet">Say hello</button>
  </main>
</body>
</html>"""

WELCOME_CSS = """* {
  margin: 0;
  padding: 0;
  box-sizing: border-box;
}

body {
  font-family: system-ui, sans-serif;
  min-height: 100vh;
  display: flex;
  align-items: center;
  justify-content: center;
  background: #1e1e2e;
  color: #f5f5f5;
}

.container {
  text-align: center;
  padding: 3rem;
  border-radius: 16px;
  background: rgba(255, 255, 255, 0.08);
}

button {
  margin-top: 1.5rem;
  padding: 0.75rem 1.5rem;
  border: none;
  border-radius: 999px;
  cursor: pointer;
}"""

WELCOME_JS = """document.addEventListener('DOMContentLoaded', function () {
  document.getElementById('greet').addEventListener('click', function () {
    alert('Hello from CodeStudio!');
  });
});"""

WELCOME_FILES = [
    ("index.html", "html", WELCOME_HTML),
    ("style.css", "css", WELCOME_CSS),
    ("script.js", "javascript", WELCOME_JS),
]


class MemoryStore:
    """Thread-safe in-memory storage for projects and files.

    Nothing is persisted: every new instance starts from the default project
    and its three welcome files.
    """

    def __init__(self, seed: bool = True):
        self._projects: Dict[str, Project] = {}
        self._files: Dict[str, File] = {}
        self._lock = threading.Lock()
        if seed:
            self.reset()

    def reset(self):
        """Drop everything and re-seed the default project"""
        with self._lock:
            self._projects.clear()
            self._files.clear()
            project = Project(
                id=config.DEFAULT_PROJECT_ID,
                name="My Project",
                description="Default project",
            )
            self._projects[project.id] = project
            for name, language, content in WELCOME_FILES:
                file = File(
                    id=str(uuid.uuid4()),
                    project_id=project.id,
                    name=name,
                    path=f"/{name}",
                    content=content,
                    language=language,
                )
                self._files[file.id] = file
        logger.info(f"Seeded project '{config.DEFAULT_PROJECT_ID}' with welcome files")

    # --- projects ---

    def get_project(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    def create_project(self, record: ProjectCreate) -> Project:
        project = Project(id=str(uuid.uuid4()), **record.model_dump())
        with self._lock:
            self._projects[project.id] = project
        return project

    # --- files ---

    def get(self, file_id: str) -> Optional[File]:
        with self._lock:
            return self._files.get(file_id)

    def list(self, project_id: str) -> List[File]:
        """List files of a project in creation order"""
        with self._lock:
            return [f for f in self._files.values() if f.project_id == project_id]

    def create(self, record: FileCreate) -> File:
        """Store a new file under a fresh identifier"""
        file = File(id=str(uuid.uuid4()), **record.model_dump())
        with self._lock:
            self._files[file.id] = file
        logger.debug(f"Created file {file.name} ({file.id}) in {file.project_id}")
        return file

    def update(self, file_id: str, content: str) -> Optional[File]:
        """Replace a file's content, None if the file does not exist"""
        with self._lock:
            file = self._files.get(file_id)
            if file is None:
                return None
            updated = file.model_copy(update={"content": content})
            self._files[file_id] = updated
        logger.debug(f"Updated file {updated.name} ({file_id})")
        return updated

    def delete(self, file_id: str) -> bool:
        with self._lock:
            file = self._files.pop(file_id, None)
        if file is None:
            return False
        logger.debug(f"Deleted file {file.name} ({file_id})")
        return True

    def count(self, project_id: Optional[str] = None) -> int:
        with self._lock:
            if project_id is None:
                return len(self._files)
            return sum(1 for f in self._files.values() if f.project_id == project_id)
