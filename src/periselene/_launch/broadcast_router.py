# Area: Launch
"""
periselene._launch.broadcast_router — Sync Message Router
=========================================================

Routes launch-protocol messages arriving on the Broadcast Channel to
their handlers based on event name, and publishes any reply.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from .._shared.guarded import guarded_call
from .._shared.protocol import build_message
from .._store.adapters import BroadcastChannel, Unsubscribe

logger = logging.getLogger("periselene.launch.router")


class SyncHandler(Protocol):
    """Protocol for sync message handlers."""

    def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle a sync message and optionally return a reply."""
        ...


class BroadcastRouter:
    """
    Routes sync messages to handlers.

    Maintains a registry of handlers for each event name and
    dispatches incoming messages to the appropriate handler.

    Usage:
        router = BroadcastRouter()
        router.register_handler("sync-request", probe_handler)
        router.attach(channel, "timer-sync-control-v1")
    """

    def __init__(self):
        """Initialize router with empty handler registry."""
        self._handlers: Dict[str, SyncHandler] = {}
        self._unsubscribes: List[Unsubscribe] = []
        self._publish: Optional[Callable[[Dict[str, Any]], None]] = None

    def register_handler(self, event: str, handler: SyncHandler) -> None:
        """
        Register a handler for an event.

        Args:
            event: The event name to handle
            handler: The handler instance
        """
        self._handlers[event] = handler
        logger.debug(f"Registered handler for {event}")

    def get_handler(self, event: str) -> Optional[SyncHandler]:
        """
        Get the handler for an event.

        Args:
            event: The event name to look up

        Returns:
            The handler if registered, None otherwise
        """
        return self._handlers.get(event)

    def route(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Route a message to its handler and publish any reply.

        Args:
            message: The message to route (must have an 'event' key)

        Returns:
            The handler's reply, or None if no handler found
        """
        event = message.get("event", "")
        handler = self._handlers.get(event)

        if handler is None:
            logger.debug(f"No handler for event: {event}")
            return None

        reply = guarded_call(f"handle {event}", handler.handle, message)
        if reply is not None and self._publish is not None:
            self._publish(reply)
        return reply

    def attach(self, channel: BroadcastChannel, topic: str) -> bool:
        """
        Subscribe every registered event on *channel*.

        Returns:
            True if all subscriptions succeeded
        """
        def publish(reply: Dict[str, Any]) -> None:
            guarded_call("channel.publish", channel.publish, topic, reply)

        self._publish = publish
        ok = True
        for event in self._handlers:
            unsubscribe = guarded_call(
                "channel.on", channel.on, topic, event, self._make_listener(event),
            )
            if unsubscribe is None:
                ok = False
            else:
                self._unsubscribes.append(unsubscribe)
        if not ok:
            logger.warning("Broadcast channel unavailable; passive clock inference only")
        return ok

    def detach(self) -> None:
        """Drop every channel subscription."""
        for unsubscribe in self._unsubscribes:
            guarded_call("channel.unsubscribe", unsubscribe)
        self._unsubscribes.clear()
        self._publish = None

    def _make_listener(self, event: str) -> Callable[[Dict[str, Any]], None]:
        def listener(payload: Dict[str, Any]) -> None:
            self.route(build_message(event, payload or {}))
        return listener
