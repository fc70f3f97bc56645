"""
DevMind Backend — Provider Registry
=====================================

What:  Holds the configured adapters keyed by vendor, tracks which one is
       active, and forwards generation requests to it.
Who:   Built once by main.py's lifespan (see factory.build_registry) and
       handed to the AssistanceService and provider routes.
When:  Mutated only by administrative actions (startup, settings screen);
       read by every generation request.

Invariant:
    The active vendor, if set, is always a registered key. Removing the
    active vendor clears the selection in the same critical section, and
    the registry never picks a replacement on its own: switching vendors
    is an explicit user action.

Concurrency:
    A single threading.Lock guards the adapter map and the active id.
    generate() snapshots the active adapter under the lock and awaits the
    vendor outside it, so a slow vendor call never blocks setActive().
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence, Set, Union

from devmind.exceptions import NoActiveProvider, ProviderNotRegistered
from devmind.providers.base import (
    ConversationMessage,
    GenerationResult,
    ProviderAdapter,
    VendorId,
)

logger = logging.getLogger(__name__)


def _coerce_vendor(vendor_id: Union[str, VendorId]) -> Optional[VendorId]:
    """Map user input to a VendorId; None for names we do not know."""
    if isinstance(vendor_id, VendorId):
        return vendor_id
    try:
        return VendorId(str(vendor_id).strip().lower())
    except ValueError:
        return None


class ProviderRegistry:
    """
    Registry of AI provider adapters with one optional active selection.

    Usage:
        registry = ProviderRegistry()
        registry.register(GeminiAdapter(config))
        registry.set_active("gemini")
        result = await registry.generate(conversation)
    """

    def __init__(self) -> None:
        self._adapters: Dict[VendorId, ProviderAdapter] = {}
        self._active: Optional[VendorId] = None
        self._lock = threading.Lock()

    # ── Administrative operations ─────────────────────────────────────────

    def register(self, adapter: ProviderAdapter) -> None:
        """
        Add or replace the adapter for adapter.vendor_identity().

        Idempotent by identity: registering the same vendor twice keeps one
        entry. If the replaced vendor was active it stays active, now served
        by the new adapter.
        """
        vendor = adapter.vendor_identity()
        with self._lock:
            replaced = vendor in self._adapters
            self._adapters[vendor] = adapter
        if replaced:
            logger.info("Replaced provider: %s (%s)", vendor.value, adapter.model_id)
        else:
            logger.info("Registered provider: %s (%s)", vendor.value, adapter.model_id)

    def unregister(self, vendor_id: Union[str, VendorId]) -> None:
        """
        Remove a vendor's adapter.

        Raises:
            ProviderNotRegistered: vendor has no adapter.
        """
        vendor = _coerce_vendor(vendor_id)
        with self._lock:
            if vendor is None or vendor not in self._adapters:
                raise ProviderNotRegistered(str(vendor_id))
            del self._adapters[vendor]
            was_active = self._active == vendor
            if was_active:
                self._active = None
        logger.info("Unregistered provider: %s", vendor.value)
        if was_active:
            logger.warning("Active provider %s removed; no provider is active", vendor.value)

    def set_active(self, vendor_id: Union[str, VendorId]) -> None:
        """
        Select which registered vendor serves generate().

        Raises:
            ProviderNotRegistered: vendor has no adapter.
        """
        vendor = _coerce_vendor(vendor_id)
        with self._lock:
            if vendor is None or vendor not in self._adapters:
                raise ProviderNotRegistered(str(vendor_id))
            self._active = vendor
        logger.info("Set active provider: %s", vendor.value)

    # ── Queries ───────────────────────────────────────────────────────────

    def active_adapter(self) -> Optional[ProviderAdapter]:
        with self._lock:
            if self._active is None:
                return None
            return self._adapters.get(self._active)

    def active_vendor(self) -> Optional[VendorId]:
        with self._lock:
            return self._active

    def get(self, vendor_id: Union[str, VendorId]) -> ProviderAdapter:
        vendor = _coerce_vendor(vendor_id)
        with self._lock:
            adapter = self._adapters.get(vendor) if vendor is not None else None
        if adapter is None:
            raise ProviderNotRegistered(str(vendor_id))
        return adapter

    def list_registered(self) -> Set[VendorId]:
        with self._lock:
            return set(self._adapters)

    def describe(self) -> List[dict]:
        """
        What: Presentation view for the provider settings screen.
        Returns one dict per vendor, in VendorId declaration order:
            {"vendor_id": "gemini", "active": True, "models": [...]}
        """
        with self._lock:
            snapshot = dict(self._adapters)
            active = self._active
        return [
            {
                "vendor_id": vendor.value,
                "active": vendor == active,
                "models": snapshot[vendor].list_models(),
            }
            for vendor in VendorId
            if vendor in snapshot
        ]

    # ── Dispatch ──────────────────────────────────────────────────────────

    async def generate(self, conversation: Sequence[ConversationMessage]) -> GenerationResult:
        """
        Forward a conversation to the active adapter.

        Raises:
            NoActiveProvider:   nothing registered, or nothing selected.
            ProviderCallFailed: passed through unchanged from the adapter.
        """
        adapter = self.active_adapter()
        if adapter is None:
            raise NoActiveProvider()
        return await adapter.generate(conversation)

    async def validate(self, vendor_id: Union[str, VendorId]) -> bool:
        """
        Probe a vendor's credential.

        Returns False for unknown or unregistered vendors instead of raising:
        the caller is asking "does this work?", and "not configured" is a no.
        """
        vendor = _coerce_vendor(vendor_id)
        with self._lock:
            adapter = self._adapters.get(vendor) if vendor is not None else None
        if adapter is None:
            logger.info("Validation requested for unregistered provider: %s", vendor_id)
            return False
        return await adapter.validate_credential()
