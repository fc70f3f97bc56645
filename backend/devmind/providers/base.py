"""
DevMind Backend — Provider Contract and Message Model
=======================================================

What:  The vendor-neutral conversation/response model plus the abstract
       ProviderAdapter every vendor implementation inherits from.
Why:   Abstractions enable swapping vendors (OpenAI → Gemini → Claude) at
       runtime without changing any calling code. This is the Strategy pattern.
How:   Concrete adapters implement _call_vendor() and _probe(); the base class
       owns the public generate()/validate_credential() so that timing, logging
       and error translation behave identically for every vendor.
Who:   Used by the registry (dispatch), the factory (construction) and the
       assistance facade (message construction).

Contract (every adapter):
    - generate() never returns None content; "" means "no assistance produced"
    - every vendor failure surfaces as ProviderCallFailed(vendor_id, cause)
    - validate_credential() answers True/False and never raises
    - the vendor SDK client is private to the adapter and never escapes it
    - adapters hold no per-request state, so concurrent calls are safe
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, SecretStr, field_validator

from devmind.exceptions import ProviderCallFailed

logger = logging.getLogger(__name__)


class VendorId(str, Enum):
    """Known AI vendors. Declaration order is the default startup priority."""

    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"


Role = Literal["system", "user", "assistant"]


# ══════════════════════════════════════════════════════════════════════════
# Message Model
# ══════════════════════════════════════════════════════════════════════════


class ConversationMessage(BaseModel):
    """
    One turn of a conversation. Order in the enclosing sequence is turn order.

    Frozen: adapters translate messages into vendor shapes but never edit them.
    """

    role: Role
    content: str

    model_config = {"frozen": True}


class Usage(BaseModel):
    """
    Vendor-reported consumption, in the vendor's own unit.

    Every field is optional: None means "not reported", which is different
    from 0 and must not be summed as if it were.
    """

    prompt_units: Optional[int] = None
    completion_units: Optional[int] = None
    total_units: Optional[int] = None

    @classmethod
    def from_counts(
        cls,
        prompt: Optional[int],
        completion: Optional[int],
        total: Optional[int] = None,
    ) -> Optional["Usage"]:
        """Returns None when the vendor reported nothing at all."""
        if prompt is None and completion is None and total is None:
            return None
        return cls(prompt_units=prompt, completion_units=completion, total_units=total)


class GenerationResult(BaseModel):
    """Normalized response from any vendor."""

    content: str = ""
    provider_id: VendorId
    model_id: str
    usage: Optional[Usage] = None


class ProviderConfig(BaseModel):
    """
    Construction-time settings for one adapter.

    Owned exclusively by the adapter built from it. The credential is a
    SecretStr, so repr() and log formatting print '**********'.
    """

    credential: SecretStr
    model_id: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_output_units: Optional[int] = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @field_validator("credential")
    @classmethod
    def validate_credential_present(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("credential must not be empty")
        return v

    def api_key(self) -> str:
        """Plain credential for handing to a vendor SDK constructor."""
        return self.credential.get_secret_value()


def fold_system_messages(
    conversation: Sequence[ConversationMessage],
) -> Tuple[Optional[str], List[ConversationMessage]]:
    """
    Split a conversation for vendors that accept a single top-level instruction.

    The FIRST system message becomes the instruction. Any later system message
    stays at its position as a plain user turn, so no context is lost and
    turn order is preserved. A conversation with nothing but that one
    instruction is sent as a single user turn instead: vendors reject an
    empty turn list.

    Returns:
        (instruction or None, remaining turns in original order)
    """
    instruction: Optional[str] = None
    turns: List[ConversationMessage] = []
    for message in conversation:
        if message.role == "system":
            if instruction is None:
                instruction = message.content
                continue
            turns.append(ConversationMessage(role="user", content=message.content))
        else:
            turns.append(message)
    if not turns and instruction is not None:
        return None, [ConversationMessage(role="user", content=instruction)]
    return instruction, turns


# ══════════════════════════════════════════════════════════════════════════
# Adapter Interface
# ══════════════════════════════════════════════════════════════════════════


class ProviderAdapter(ABC):
    """
    Abstract interface for one AI vendor.

    Subclasses set:
        VENDOR:        VendorId this adapter serves
        DEFAULT_MODEL: cheapest general-purpose model, used when unset
        MODELS:        static catalogue, default model first

    and implement:
        _call_vendor(conversation) -> GenerationResult  (one network call)
        _probe()                                         (cheap auth check)
    """

    VENDOR: VendorId
    DEFAULT_MODEL: str
    MODELS: Tuple[str, ...] = ()

    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_MAX_OUTPUT_UNITS = 1000

    def __init__(self, config: ProviderConfig):
        self._config = config

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model_id!r})"

    # ── Effective generation knobs ────────────────────────────────────────
    # `is None` checks: a configured temperature of 0 is a real value

    @property
    def model_id(self) -> str:
        return self._config.model_id or self.DEFAULT_MODEL

    @property
    def temperature(self) -> float:
        if self._config.temperature is None:
            return self.DEFAULT_TEMPERATURE
        return self._config.temperature

    @property
    def max_output_units(self) -> int:
        if self._config.max_output_units is None:
            return self.DEFAULT_MAX_OUTPUT_UNITS
        return self._config.max_output_units

    # ── Public contract ───────────────────────────────────────────────────

    def vendor_identity(self) -> VendorId:
        return self.VENDOR

    def list_models(self) -> List[str]:
        """Static catalogue; no network call."""
        return list(self.MODELS)

    async def generate(self, conversation: Sequence[ConversationMessage]) -> GenerationResult:
        """
        Send a conversation to the vendor and return the normalized reply.

        Args:
            conversation: Non-empty, ordered messages. System messages may
                          appear anywhere; each adapter maps them to what its
                          vendor supports.

        Returns:
            GenerationResult with content "" when the vendor produced nothing.

        Raises:
            ValueError:         Empty conversation (caller bug, nothing sent).
            ProviderCallFailed: Anything went wrong talking to the vendor.
        """
        if not conversation:
            raise ValueError("conversation must contain at least one message")

        vendor = self.vendor_identity().value
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            result = await self._call_vendor(list(conversation))
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            # Exception type only: vendor messages can echo request metadata
            logger.warning(
                "[%s] %s call failed after %.0fms: %s",
                call_id,
                vendor,
                duration_ms,
                type(exc).__name__,
            )
            raise ProviderCallFailed(vendor, exc, context={"call_id": call_id}) from exc

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "[%s] %s generate completed in %.0fms, model=%s, %d messages in, %d chars out",
            call_id,
            vendor,
            duration_ms,
            result.model_id,
            len(conversation),
            len(result.content),
        )
        return result

    async def validate_credential(self) -> bool:
        """
        Check whether the stored credential works.

        How:     One cheap vendor call (model listing), see _probe().
        Returns: True if the vendor accepted it, False on ANY failure
                 (network, auth, quota). Never raises.
        """
        try:
            await self._probe()
        except Exception as exc:
            logger.warning(
                "%s credential validation failed: %s",
                self.vendor_identity().value,
                type(exc).__name__,
            )
            return False
        return True

    # ── Vendor-specific hooks ─────────────────────────────────────────────

    @abstractmethod
    async def _call_vendor(self, conversation: List[ConversationMessage]) -> GenerationResult:
        """Translate, call the vendor once, translate back. Exceptions propagate."""
        ...

    @abstractmethod
    async def _probe(self) -> None:
        """Minimal authenticated call. Raise on failure."""
        ...
