"""Storage for resumes, company insights and interview sessions."""

import hashlib
import re
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError

from ..models.base import BaseModel
from ..models.company import CompanyInsight, insight_key
from ..models.interview import InterviewSession
from ..models.resume import ResumeRecord
from ..utils.exceptions import StorageError
from ..utils.logging import get_logger

M = TypeVar("M", bound=BaseModel)


class StorageInterface:
    """Abstract interface for storage operations."""

    def save_resume(self, resume: ResumeRecord) -> ResumeRecord:
        """Save an analyzed resume."""
        raise NotImplementedError

    def get_latest_resume(self, user_id: int) -> Optional[ResumeRecord]:
        """Most recently created resume for a user."""
        raise NotImplementedError

    def list_resumes(self, user_id: int) -> List[ResumeRecord]:
        """A user's resumes, oldest first."""
        raise NotImplementedError

    def save_company_insight(self, insight: CompanyInsight) -> CompanyInsight:
        """Save company research, replacing any entry for the same company and position."""
        raise NotImplementedError

    def get_company_insight(self, company_name: str, position: str) -> Optional[CompanyInsight]:
        """Load company research, matching company and position case-insensitively."""
        raise NotImplementedError

    def save_session(self, session: InterviewSession) -> InterviewSession:
        """Save an interview session."""
        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[InterviewSession]:
        """Load an interview session by ID."""
        raise NotImplementedError

    def list_sessions(self, user_id: Optional[int] = None) -> List[InterviewSession]:
        """Sessions, oldest first, optionally restricted to one user."""
        raise NotImplementedError


class MemoryStorageManager(StorageInterface):
    """In-process storage. Stored models are copies, so callers cannot mutate them in place."""

    def __init__(self):
        self._lock = threading.RLock()
        self._resumes: Dict[str, ResumeRecord] = {}
        self._insights: Dict[Tuple[str, str], CompanyInsight] = {}
        self._sessions: Dict[str, InterviewSession] = {}
        self.logger = get_logger(__name__)

    def save_resume(self, resume: ResumeRecord) -> ResumeRecord:
        with self._lock:
            self._resumes[resume.id] = resume.model_copy(deep=True)
        return resume

    def get_latest_resume(self, user_id: int) -> Optional[ResumeRecord]:
        resumes = self.list_resumes(user_id)
        return resumes[-1] if resumes else None

    def list_resumes(self, user_id: int) -> List[ResumeRecord]:
        with self._lock:
            resumes = [r.model_copy(deep=True) for r in self._resumes.values() if r.user_id == user_id]
        return sorted(resumes, key=lambda r: r.created_at)

    def save_company_insight(self, insight: CompanyInsight) -> CompanyInsight:
        with self._lock:
            self._insights[insight.cache_key] = insight.model_copy(deep=True)
        return insight

    def get_company_insight(self, company_name: str, position: str) -> Optional[CompanyInsight]:
        with self._lock:
            insight = self._insights.get(insight_key(company_name, position))
        return insight.model_copy(deep=True) if insight else None

    def save_session(self, session: InterviewSession) -> InterviewSession:
        with self._lock:
            self._sessions[session.id] = session.model_copy(deep=True)
        return session

    def get_session(self, session_id: str) -> Optional[InterviewSession]:
        with self._lock:
            session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    def list_sessions(self, user_id: Optional[int] = None) -> List[InterviewSession]:
        with self._lock:
            sessions = [
                s.model_copy(deep=True)
                for s in self._sessions.values()
                if user_id is None or s.user_id == user_id
            ]
        return sorted(sessions, key=lambda s: s.created_at)


class FileStorageManager(StorageInterface):
    """File-based storage manager using one JSON file per record."""

    def __init__(self, base_path: str = "data"):
        """Initialize the file storage manager.

        Args:
            base_path: Base directory for storing data files.
        """
        self.base_path = Path(base_path)
        self.resumes_path = self.base_path / "resumes"
        self.insights_path = self.base_path / "insights"
        self.sessions_path = self.base_path / "sessions"
        self._lock = threading.RLock()
        self.logger = get_logger(__name__)

        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        try:
            self.resumes_path.mkdir(parents=True, exist_ok=True)
            self.insights_path.mkdir(parents=True, exist_ok=True)
            self.sessions_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create storage directories: {str(e)}", file_path=str(self.base_path))

    @staticmethod
    def _insight_filename(company_name: str, position: str) -> str:
        key = "|".join(insight_key(company_name, position))
        slug = re.sub(r"[^a-z0-9]+", "-", key).strip("-")[:60] or "insight"
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:10]
        return f"{slug}-{digest}.json"

    def _write(self, file_path: Path, record: BaseModel) -> None:
        try:
            with self._lock:
                with open(file_path, "w", encoding="utf-8") as f:
                    f.write(record.model_dump_json(indent=2))
        except OSError as e:
            self.logger.error(f"Failed to write {file_path}: {str(e)}")
            raise StorageError(f"Save failed: {str(e)}", file_path=str(file_path))

    def _read(self, file_path: Path, model: Type[M]) -> Optional[M]:
        with self._lock:
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    content = f.read()
            except OSError as e:
                raise StorageError(f"Load failed: {str(e)}", file_path=str(file_path))
        try:
            return model.model_validate_json(content)
        except ValidationError as e:
            self.logger.warning(f"Skipping unreadable record {file_path}: {e.error_count()} validation errors")
            return None

    def _read_all(self, directory: Path, model: Type[M]) -> List[M]:
        with self._lock:
            files = sorted(directory.glob("*.json"))
        records = []
        for file_path in files:
            record = self._read(file_path, model)
            if record is not None:
                records.append(record)
        return records

    def save_resume(self, resume: ResumeRecord) -> ResumeRecord:
        self._write(self.resumes_path / f"{resume.id}.json", resume)
        self.logger.info(f"Resume {resume.id} saved for user {resume.user_id}")
        return resume

    def get_latest_resume(self, user_id: int) -> Optional[ResumeRecord]:
        resumes = self.list_resumes(user_id)
        return resumes[-1] if resumes else None

    def list_resumes(self, user_id: int) -> List[ResumeRecord]:
        resumes = [r for r in self._read_all(self.resumes_path, ResumeRecord) if r.user_id == user_id]
        return sorted(resumes, key=lambda r: r.created_at)

    def save_company_insight(self, insight: CompanyInsight) -> CompanyInsight:
        file_path = self.insights_path / self._insight_filename(insight.company_name, insight.position)
        self._write(file_path, insight)
        self.logger.info(f"Company insight for {insight.company_name} / {insight.position} saved")
        return insight

    def get_company_insight(self, company_name: str, position: str) -> Optional[CompanyInsight]:
        file_path = self.insights_path / self._insight_filename(company_name, position)
        return self._read(file_path, CompanyInsight)

    def save_session(self, session: InterviewSession) -> InterviewSession:
        self._write(self.sessions_path / f"{session.id}.json", session)
        self.logger.info(f"Session {session.id} saved successfully")
        return session

    def get_session(self, session_id: str) -> Optional[InterviewSession]:
        # Ids are uuids; anything with a path separator cannot name a session file
        if not session_id or Path(session_id).name != session_id:
            return None
        return self._read(self.sessions_path / f"{session_id}.json", InterviewSession)

    def list_sessions(self, user_id: Optional[int] = None) -> List[InterviewSession]:
        sessions = [
            s for s in self._read_all(self.sessions_path, InterviewSession)
            if user_id is None or s.user_id == user_id
        ]
        return sorted(sessions, key=lambda s: s.created_at)


def create_storage(backend: str = "memory", base_path: str = "data") -> StorageInterface:
    """Create a storage backend by name.

    Args:
        backend: ``memory`` or ``file``
        base_path: Directory used by the file backend

    Raises:
        ValueError: If the backend is unknown.
    """
    backend = (backend or "memory").lower()
    if backend == "memory":
        return MemoryStorageManager()
    if backend == "file":
        return FileStorageManager(base_path)
    raise ValueError(f"Unsupported storage type: {backend}")
