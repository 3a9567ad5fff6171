"""JSON-file persistence for saved what-if scenarios."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from core.exceptions import ScenarioNotFoundError
from core.models import BaselineMetrics, ScenarioFactors, UserId

__all__ = ["SavedScenario", "ScenarioStore"]

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"name", "description", "factors", "results", "tags", "is_favorite", "last_viewed_at"}
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SavedScenario:
    id: str
    user_id: UserId
    name: str
    factors: ScenarioFactors
    results: Optional[BaselineMetrics] = None
    description: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    is_favorite: bool = False
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)
    last_viewed_at: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": str(self.user_id),
            "name": self.name,
            "description": self.description,
            "scenario_data": self.factors.to_dict(),
            "results": self.results.to_dict() if self.results is not None else None,
            "tags": list(self.tags),
            "is_favorite": self.is_favorite,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "last_viewed_at": self.last_viewed_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SavedScenario":
        results = record.get("results")
        return cls(
            id=str(record["id"]),
            user_id=UserId(str(record["user_id"])),
            name=str(record.get("name", "")),
            factors=ScenarioFactors.from_mapping(record.get("scenario_data") or {}),
            results=BaselineMetrics.from_mapping(results) if results else None,
            description=record.get("description"),
            tags=tuple(record.get("tags") or ()),
            is_favorite=bool(record.get("is_favorite", False)),
            created_at=str(record.get("created_at") or _now()),
            updated_at=str(record.get("updated_at") or _now()),
            last_viewed_at=record.get("last_viewed_at"),
        )


class ScenarioStore:
    """Saved scenarios persisted to a single JSON document.

    The owning user is always passed in explicitly; the store keeps no notion
    of a current user.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def list_scenarios(self, user_id: UserId) -> list[SavedScenario]:
        """Return the user's scenarios, newest first."""

        with self._lock:
            owned = [
                (scenario.created_at, index, scenario)
                for index, scenario in enumerate(self._read())
                if scenario.user_id == user_id
            ]
        owned.sort(key=lambda item: item[:2], reverse=True)
        return [scenario for _, _, scenario in owned]

    def get(self, scenario_id: str) -> SavedScenario:
        with self._lock:
            return self._find(self._read(), scenario_id)

    def save(
        self,
        user_id: UserId,
        name: str,
        factors: ScenarioFactors,
        *,
        results: Optional[BaselineMetrics] = None,
        description: Optional[str] = None,
        tags: Iterable[str] = (),
    ) -> SavedScenario:
        scenario = SavedScenario(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            factors=factors,
            results=results,
            description=description,
            tags=tuple(tags),
        )
        with self._lock:
            scenarios = self._read()
            scenarios.append(scenario)
            self._write(scenarios)
        logger.info("Saved scenario", extra={"scenario_id": scenario.id, "user_id": str(user_id)})
        return scenario

    def update(self, scenario_id: str, **changes: Any) -> SavedScenario:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if "tags" in changes:
            changes["tags"] = tuple(changes["tags"])

        with self._lock:
            scenarios = self._read()
            current = self._find(scenarios, scenario_id)
            updated = replace(current, **changes, updated_at=_now())
            self._write([updated if s.id == scenario_id else s for s in scenarios])
        return updated

    def delete(self, scenario_id: str) -> None:
        with self._lock:
            scenarios = self._read()
            self._find(scenarios, scenario_id)
            self._write([s for s in scenarios if s.id != scenario_id])
        logger.info("Deleted scenario", extra={"scenario_id": scenario_id})

    def toggle_favorite(self, scenario_id: str) -> SavedScenario:
        current = self.get(scenario_id)
        return self.update(scenario_id, is_favorite=not current.is_favorite)

    def mark_viewed(self, scenario_id: str) -> SavedScenario:
        return self.update(scenario_id, last_viewed_at=_now())

    @staticmethod
    def _find(scenarios: list[SavedScenario], scenario_id: str) -> SavedScenario:
        for scenario in scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise ScenarioNotFoundError(f"Scenario not found: {scenario_id}")

    def _read(self) -> list[SavedScenario]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        return [SavedScenario.from_record(record) for record in raw]

    def _write(self, scenarios: list[SavedScenario]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([s.to_record() for s in scenarios], indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)
