"""
DevMind Backend — Adapter Factory and Startup Selection
=========================================================

What:  Builds adapters from ProviderConfig and assembles the startup registry.
Who:   create_adapter() is used by build_registry() and by the settings route
       that registers a key entered at runtime.

Startup selection policy:
    1. Walk vendors in settings.provider_priority_list (default: openai,
       gemini, claude)
    2. Register every vendor whose credential is present
    3. Activate the FIRST one registered
    Later changes happen only through ProviderRegistry.set_active().
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, Union

from devmind.providers.base import ProviderAdapter, ProviderConfig, VendorId
from devmind.providers.claude_adapter import ClaudeAdapter
from devmind.providers.gemini_adapter import GeminiAdapter
from devmind.providers.openai_adapter import OpenAIAdapter
from devmind.providers.registry import ProviderRegistry

if TYPE_CHECKING:
    from devmind.config import Settings

logger = logging.getLogger(__name__)

ADAPTER_CLASSES: Dict[VendorId, Type[ProviderAdapter]] = {
    VendorId.OPENAI: OpenAIAdapter,
    VendorId.GEMINI: GeminiAdapter,
    VendorId.CLAUDE: ClaudeAdapter,
}


def create_adapter(
    vendor_id: Union[str, VendorId],
    config: ProviderConfig,
    client: Optional[Any] = None,
) -> ProviderAdapter:
    """
    Construct the adapter for a vendor.

    Args:
        vendor_id: "openai", "gemini" or "claude"
        config:    credential and generation knobs
        client:    optional pre-built vendor client (tests)

    Raises:
        ValueError: unknown vendor id
    """
    try:
        vendor = VendorId(vendor_id)
    except ValueError:
        raise ValueError(f"Unknown provider: {vendor_id}") from None
    adapter_class = ADAPTER_CLASSES[vendor]
    if client is None:
        return adapter_class(config)
    return adapter_class(config, client=client)


def build_registry(settings: "Settings") -> ProviderRegistry:
    """
    Create the process-wide registry from configured credentials.

    A vendor whose adapter fails to construct (e.g. SDK rejects the key
    format) is logged and skipped; the next vendor in priority order can
    still become active.
    """
    registry = ProviderRegistry()

    for vendor, config in settings.provider_configs():
        try:
            adapter = create_adapter(vendor, config)
        except Exception as e:
            logger.error(
                "Could not initialise %s provider: %s", vendor.value, type(e).__name__
            )
            continue
        registry.register(adapter)
        if registry.active_vendor() is None:
            registry.set_active(vendor)

    registered = sorted(v.value for v in registry.list_registered())
    active = registry.active_vendor()
    logger.info(
        "Provider registry ready: registered=%s, active=%s",
        registered or "none",
        active.value if active else "none",
    )
    return registry
