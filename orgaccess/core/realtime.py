"""
Change Notifications
Broadcasts "entity changed" events to connected real-time subscribers.

Services never emit; the layer that invoked a successful mutation does.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Set, TypeVar

import structlog
from fastapi import WebSocket

logger = structlog.get_logger()

EntityT = TypeVar("EntityT")


class EntityKind(str, Enum):
    DEPARTMENT = "department"
    SITE = "site"
    GROUP = "group"
    PERMISSION = "permission"
    ROLE = "role"
    USER = "user"


class RealtimePort(ABC):
    @abstractmethod
    async def broadcast(self, kind: EntityKind, entity_id: str) -> None:
        raise NotImplementedError

    async def notify(self, kind: EntityKind, entity: Optional[EntityT]) -> Optional[EntityT]:
        """Broadcast for a service result and hand it back; None results are not broadcast"""
        if entity is not None:
            await self.broadcast(kind, entity.id)
        return entity


class WebSocketManager(RealtimePort):
    """Manages WebSocket connections and fans out entity change events"""

    def __init__(self):
        self._connections: Set[WebSocket] = set()
        # Clients that only want one kind of entity
        self._kind_subscriptions: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        """Accept and register a WebSocket connection; it receives every kind"""
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        logger.debug("WebSocket connected", total=len(self._connections))

    async def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection and all its subscriptions"""
        async with self._lock:
            self._connections.discard(websocket)
            for kind in list(self._kind_subscriptions.keys()):
                self._kind_subscriptions[kind].discard(websocket)
                if not self._kind_subscriptions[kind]:
                    del self._kind_subscriptions[kind]
        logger.debug("WebSocket disconnected", total=len(self._connections))

    async def subscribe_kind(self, websocket: WebSocket, kind: EntityKind):
        """Restrict a connected client to updates of one entity kind"""
        async with self._lock:
            self._connections.discard(websocket)
            self._kind_subscriptions.setdefault(EntityKind(kind).value, set()).add(websocket)
        logger.debug("Subscribed to entity kind", kind=EntityKind(kind).value)

    async def broadcast(self, kind: EntityKind, entity_id: str) -> None:
        kind = EntityKind(kind)
        message = json.dumps({
            "type": f"{kind.value}_updated",
            "kind": kind.value,
            "id": entity_id,
        })

        targets: Set[WebSocket] = set()
        async with self._lock:
            targets.update(self._connections)
            targets.update(self._kind_subscriptions.get(kind.value, set()))

        disconnected = []
        for ws in targets:
            try:
                await ws.send_text(message)
            except Exception as exc:  # noqa: BLE001
                logger.debug("Dropping WebSocket after failed send", error=str(exc))
                disconnected.append(ws)

        for ws in disconnected:
            await self.disconnect(ws)

        logger.debug("Entity change broadcast", kind=kind.value, id=entity_id, targets=len(targets))


# Singleton instance
ws_manager = WebSocketManager()
