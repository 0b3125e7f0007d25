# -*- coding: utf-8 -*-
"""
Provenance Tracking for the bulk hygiene pass

SHA-256 audit trail of every record the hygiene pass rewrites. Entries
are kept in an in-memory log where each chain hash covers the previous
one, so the final hash of a run fingerprints exactly which sanitized
records were written, and in which order.

Guarantees:
    - All hashes are deterministic SHA-256 over canonical JSON
    - Chain hashing links operations in sequence
    - JSON export for external audit systems

Example:
    >>> from klase.provenance import ProvenanceTracker
    >>> tracker = ProvenanceTracker()
    >>> tracker.record("post", "p1", "sanitize", {"title": "Hi"})
    >>> assert tracker.verify_chain()

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def build_hash(data: Any) -> str:
    """Build a SHA-256 hash of the canonical JSON form of ``data``."""
    serialized = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class ProvenanceTracker:
    """Chain-hashed log of hygiene operations.

    Attributes:
        _chain: Entries in the order they were recorded.
        _last_chain_hash: Most recent chain hash for linking.
        _lock: Thread-safety lock.
    """

    # Initial chain hash (genesis)
    _GENESIS_HASH = hashlib.sha256(b"klase-data-hygiene-genesis").hexdigest()

    def __init__(self) -> None:
        self._chain: List[Dict[str, Any]] = []
        self._last_chain_hash: str = self._GENESIS_HASH
        self._lock = threading.Lock()

    def record(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
        data: Any,
    ) -> str:
        """Record a provenance entry for an entity operation.

        Args:
            entity_type: Kind of record (person, post, class).
            entity_id: Record identifier (may be empty for rows without one).
            action: Action performed (sanitize, report, ...).
            data: Resulting record; hashed, never stored.

        Returns:
            Chain hash of the new entry.
        """
        entry = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "action": action,
            "data_hash": build_hash(data),
            "timestamp": _utcnow().isoformat(),
            "chain_hash": "",
        }

        with self._lock:
            chain_hash = self._compute_chain_hash(self._last_chain_hash, entry)
            entry["chain_hash"] = chain_hash
            self._chain.append(entry)
            self._last_chain_hash = chain_hash

        logger.debug(
            "Recorded provenance: %s/%s action=%s hash=%s",
            entity_type, entity_id[:8], action, chain_hash[:16],
        )
        return chain_hash

    def verify_chain(self) -> bool:
        """Recompute every chain hash from genesis and compare."""
        with self._lock:
            chain = [dict(entry) for entry in self._chain]

        previous = self._GENESIS_HASH
        for index, entry in enumerate(chain):
            expected = self._compute_chain_hash(previous, entry)
            if entry.get("chain_hash") != expected:
                logger.warning(
                    "Provenance chain broken at entry %d (%s/%s)",
                    index, entry.get("entity_type"), entry.get("entity_id"),
                )
                return False
            previous = expected
        return True

    def get_chain(self) -> List[Dict[str, Any]]:
        """Return a copy of all entries, oldest first."""
        with self._lock:
            return [dict(entry) for entry in self._chain]

    @staticmethod
    def _compute_chain_hash(previous_hash: str, entry: Dict[str, Any]) -> str:
        combined = json.dumps({
            "previous": previous_hash,
            "entity": f"{entry['entity_type']}:{entry['entity_id']}",
            "data": entry["data_hash"],
            "action": entry["action"],
            "timestamp": entry["timestamp"],
        }, sort_keys=True)
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()

    @property
    def chain_hash(self) -> str:
        """Return the latest chain hash (genesis when nothing was recorded)."""
        with self._lock:
            return self._last_chain_hash

    @property
    def entry_count(self) -> int:
        with self._lock:
            return len(self._chain)

    def export_json(self) -> str:
        """Export all provenance records as a JSON string."""
        with self._lock:
            data = list(self._chain)
        return json.dumps(data, indent=2, default=str)


__all__ = [
    "ProvenanceTracker",
    "build_hash",
]
