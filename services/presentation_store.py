"""
Persistence boundary for generated presentations.

The pipeline hands finished slides to a ``PresentationStore``; the Supabase
implementation writes the ``presentations`` and ``prompts_history`` tables,
the in-memory one backs local development and tests.
"""
import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from agents.generation.exceptions import GenerationError
from setup_logging_optimized import get_logger
from utils.supabase import (
    SUPABASE_TIMEOUT_SECONDS,
    get_supabase_client,
    is_supabase_configured,
    perform_supabase_operation_with_retry,
)

logger = get_logger(__name__)

PRESENTATIONS_TABLE = "presentations"
PROMPTS_HISTORY_TABLE = "prompts_history"


class PersistenceError(GenerationError):
    """The document store rejected or failed a write"""
    pass


class PresentationStore(ABC):
    """Owner-scoped CRUD over presentations plus the prompt history log."""

    @abstractmethod
    async def create(self, user_id: str, title: str, slides_json: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def list(self, user_id: str) -> List[Dict[str, Any]]:
        """Presentations owned by ``user_id``, newest first."""
        pass

    @abstractmethod
    async def update(
        self,
        presentation_id: str,
        user_id: str,
        title: Optional[str] = None,
        slides_json: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Updated row, or None when no presentation with that id belongs to the user."""
        pass

    @abstractmethod
    async def delete(self, presentation_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    async def record_prompt(self, user_id: str, input_text: str, ai_response: Dict[str, Any]) -> None:
        pass


def _update_fields(title: Optional[str], slides_json: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {"updated_at": datetime.now(timezone.utc).isoformat()}
    if title is not None:
        fields["title"] = title
    if slides_json is not None:
        fields["slides_json"] = slides_json
    return fields


class SupabasePresentationStore(PresentationStore):
    """Supabase tables; blocking SDK calls run in a worker thread."""

    def __init__(self, client=None, timeout_seconds: float = SUPABASE_TIMEOUT_SECONDS):
        self._client = client
        self.timeout_seconds = timeout_seconds

    @property
    def client(self):
        return self._client or get_supabase_client()

    async def _run(self, operation, description: str, idempotent: bool = True):
        try:
            return await asyncio.to_thread(
                perform_supabase_operation_with_retry,
                operation,
                description,
                timeout_seconds=self.timeout_seconds,
                retry_on_timeout=idempotent,
            )
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"[STORE] Supabase {description} failed: {e}")
            raise PersistenceError(f"Failed to {description}", cause=e)

    async def create(self, user_id: str, title: str, slides_json: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._run(
            lambda: self.client.table(PRESENTATIONS_TABLE)
            .insert({"user_id": user_id, "title": title, "slides_json": slides_json})
            .execute(),
            "save presentation",
            idempotent=False,
        )
        if not result.data:
            raise PersistenceError("Failed to save presentation")
        return result.data[0]

    async def list(self, user_id: str) -> List[Dict[str, Any]]:
        result = await self._run(
            lambda: self.client.table(PRESENTATIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute(),
            "list presentations",
        )
        return result.data or []

    async def update(self, presentation_id, user_id, title=None, slides_json=None):
        result = await self._run(
            lambda: self.client.table(PRESENTATIONS_TABLE)
            .update(_update_fields(title, slides_json))
            .eq("id", presentation_id)
            .eq("user_id", user_id)
            .execute(),
            "update presentation",
        )
        return result.data[0] if result.data else None

    async def delete(self, presentation_id: str, user_id: str) -> bool:
        result = await self._run(
            lambda: self.client.table(PRESENTATIONS_TABLE)
            .delete()
            .eq("id", presentation_id)
            .eq("user_id", user_id)
            .execute(),
            "delete presentation",
        )
        return bool(result.data)

    async def record_prompt(self, user_id: str, input_text: str, ai_response: Dict[str, Any]) -> None:
        await self._run(
            lambda: self.client.table(PROMPTS_HISTORY_TABLE)
            .insert({"user_id": user_id, "input_text": input_text, "ai_response": ai_response})
            .execute(),
            "record prompt history",
            idempotent=False,
        )


class InMemoryPresentationStore(PresentationStore):
    def __init__(self):
        self.presentations: Dict[str, Dict[str, Any]] = {}
        self.prompts_history: List[Dict[str, Any]] = []
        self._sequence = 0

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    async def create(self, user_id, title, slides_json):
        self._sequence += 1
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title,
            "slides_json": slides_json,
            "created_at": now,
            "updated_at": now,
            "_sequence": self._sequence,
        }
        self.presentations[row["id"]] = row
        return self._public(row)

    async def list(self, user_id):
        rows = [row for row in self.presentations.values() if row["user_id"] == user_id]
        rows.sort(key=lambda row: row["_sequence"], reverse=True)
        return [self._public(row) for row in rows]

    async def update(self, presentation_id, user_id, title=None, slides_json=None):
        row = self.presentations.get(presentation_id)
        if row is None or row["user_id"] != user_id:
            return None
        row.update(_update_fields(title, slides_json))
        return self._public(row)

    async def delete(self, presentation_id, user_id):
        row = self.presentations.get(presentation_id)
        if row is None or row["user_id"] != user_id:
            return False
        del self.presentations[presentation_id]
        return True

    async def record_prompt(self, user_id, input_text, ai_response):
        self.prompts_history.append({
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "input_text": input_text,
            "ai_response": ai_response,
            "created_at": self._now(),
        })

    @staticmethod
    def _public(row: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in row.items() if not key.startswith("_")}


_default_store: Optional[PresentationStore] = None


def get_presentation_store() -> PresentationStore:
    """Supabase when configured, otherwise a process-local in-memory store."""
    global _default_store
    if _default_store is None:
        if is_supabase_configured():
            _default_store = SupabasePresentationStore()
        else:
            logger.warning("[STORE] Supabase not configured, using in-memory presentation store")
            _default_store = InMemoryPresentationStore()
    return _default_store
