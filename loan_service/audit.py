"""
Audit Trail Module

Hash-chained append-only log of loan lifecycle events. Each event stores the
SHA-256 hash of its predecessor so that edits or deletions break the chain.
"""

import hashlib
import json
import threading
from datetime import datetime, date, timezone
from dataclasses import dataclass
from typing import Dict, List, Optional, Any
from enum import Enum
from decimal import Decimal
import uuid

from .storage import StorageInterface, StorageRecord


class AuditEventType(Enum):
    """Types of audit events"""
    CUSTOMER_CREATED = "customer_created"
    CREDIT_LIMIT_CHANGED = "credit_limit_changed"
    LOAN_CREATED = "loan_created"
    INSTALLMENT_PAID = "installment_paid"
    LOAN_PAYMENT_APPLIED = "loan_payment_applied"
    LOAN_PAID_OFF = "loan_paid_off"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass
class AuditEvent(StorageRecord):
    """Immutable audit event"""
    event_type: AuditEventType
    entity_type: str    # customer, loan or installment
    entity_id: str
    previous_hash: str
    current_hash: str
    metadata: Dict[str, Any]

    def calculate_hash(self) -> str:
        """SHA-256 over every field except current_hash"""
        hash_data = {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'event_type': self.event_type.value,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'previous_hash': self.previous_hash,
            'metadata': self.metadata,
        }
        json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(json_data.encode('utf-8')).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'event_type': self.event_type.value,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'previous_hash': self.previous_hash,
            'current_hash': self.current_hash,
            'metadata': self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditEvent':
        return cls(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            event_type=AuditEventType(data['event_type']),
            entity_type=data['entity_type'],
            entity_id=data['entity_id'],
            previous_hash=data['previous_hash'],
            current_hash=data['current_hash'],
            metadata=data.get('metadata') or {},
        )


class AuditTrail:
    """
    Hash-chained audit trail.

    Events are written through the same storage backend as the records they
    describe, so an event logged inside ``storage.atomic()`` is rolled back
    together with the change it records.
    """

    def __init__(self, storage: StorageInterface, table_name: str = "audit_events", enabled: bool = True):
        self.storage = storage
        self.table_name = table_name
        self.enabled = enabled
        self._lock = threading.Lock()

    def _last_hash(self) -> str:
        """
        Hash of the newest stored event. Read from storage on every append,
        so events dropped by a rolled back unit of work are never linked to.
        """
        latest = self.storage.load_latest(self.table_name)
        return latest['current_hash'] if latest else ""

    def log_event(
        self,
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Optional[AuditEvent]:
        """
        Append an event to the chain

        Returns:
            The stored AuditEvent, or None when auditing is disabled
        """
        if not self.enabled:
            return None

        with self._lock:
            now = datetime.now(timezone.utc)
            event = AuditEvent(
                id=str(uuid.uuid4()),
                created_at=now,
                updated_at=now,
                event_type=event_type,
                entity_type=entity_type,
                entity_id=entity_id,
                previous_hash=self._last_hash(),
                current_hash="",
                metadata=_jsonable(metadata or {}),
            )
            event.current_hash = event.calculate_hash()
            self.storage.save(self.table_name, event.id, event.to_dict())
            return event

    def get_all_events(self) -> List[AuditEvent]:
        return [AuditEvent.from_dict(data) for data in self.storage.load_all(self.table_name)]

    def get_events_for_entity(self, entity_type: str, entity_id: str) -> List[AuditEvent]:
        events_data = self.storage.find(
            self.table_name, {'entity_type': entity_type, 'entity_id': entity_id}
        )
        return [AuditEvent.from_dict(data) for data in events_data]

    def verify_integrity(self) -> Dict[str, Any]:
        """Recompute every hash and check each link of the chain"""
        result = {
            'valid': True,
            'total_events': 0,
            'hash_errors': [],
            'chain_breaks': [],
        }

        previous_hash = ""
        for position, event in enumerate(self.get_all_events()):
            result['total_events'] += 1
            if event.calculate_hash() != event.current_hash:
                result['valid'] = False
                result['hash_errors'].append({'event_id': event.id, 'position': position})
            if event.previous_hash != previous_hash:
                result['valid'] = False
                result['chain_breaks'].append({'event_id': event.id, 'position': position})
            previous_hash = event.current_hash

        return result
