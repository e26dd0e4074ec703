"""
Signing adapter for Fusion+ orders.

Produces EIP-712 signatures over limit orders and personal-message
signatures over cancellation digests. Chain-bound signers and their RPC
providers live in an explicitly owned ``ChainResourceCache``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import keccak, to_bytes, to_hex
from web3 import Web3

from ...services.address import is_bytes32_hex
from .errors import PipelineStep, SigningError
from .models import LimitOrder, TypedDataDomain, build_typed_data

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str], Web3]


def _http_provider(rpc_url: str) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 30}))


@dataclass(frozen=True)
class ChainSigner:
    """A local account bound to one chain and its RPC provider."""

    account: LocalAccount
    chain_id: int
    web3: Web3

    @property
    def address(self) -> str:
        return self.account.address


class ChainResourceCache:
    """
    Process-lifetime cache of RPC providers (per chain) and signers (per key and chain).

    Entries are created lazily and never evicted. Concurrent first access
    converges on a single instance per key.
    """

    def __init__(
        self,
        rpc_urls: Mapping[int, str],
        *,
        default_chain_id: int = 1,
        provider_factory: Optional[ProviderFactory] = None,
    ) -> None:
        self._rpc_urls = dict(rpc_urls)
        self._default_chain_id = default_chain_id
        self._provider_factory = provider_factory or _http_provider
        self._providers: Dict[int, Web3] = {}
        self._signers: Dict[Tuple[str, int], ChainSigner] = {}
        self._lock = threading.Lock()

    def rpc_url_for(self, chain_id: int) -> str:
        url = self._rpc_urls.get(chain_id) or self._rpc_urls.get(self._default_chain_id)
        if not url:
            raise SigningError(f"No RPC endpoint configured for chain {chain_id}", step=PipelineStep.SIGN)
        return url

    def provider(self, chain_id: int) -> Web3:
        existing = self._providers.get(chain_id)
        if existing is not None:
            return existing
        with self._lock:
            if chain_id not in self._providers:
                self._providers[chain_id] = self._provider_factory(self.rpc_url_for(chain_id))
                logger.debug("Created RPC provider for chain %s", chain_id)
            return self._providers[chain_id]

    def signer(self, private_key: str, chain_id: int) -> ChainSigner:
        # Keyed by a digest so raw key material is not held as a map key.
        cache_key = (_key_fingerprint(private_key), chain_id)
        existing = self._signers.get(cache_key)
        if existing is not None:
            return existing
        web3 = self.provider(chain_id)
        with self._lock:
            if cache_key not in self._signers:
                self._signers[cache_key] = ChainSigner(
                    account=_load_account(private_key),
                    chain_id=chain_id,
                    web3=web3,
                )
            return self._signers[cache_key]

    @property
    def provider_count(self) -> int:
        return len(self._providers)

    @property
    def signer_count(self) -> int:
        return len(self._signers)

    def clear(self) -> None:
        with self._lock:
            self._signers.clear()
            self._providers.clear()


def _key_fingerprint(private_key: str) -> str:
    return to_hex(keccak(text=private_key.strip().lower()))


def _load_account(private_key: str) -> LocalAccount:
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError):
        # The cause is dropped; its message can echo key material.
        raise SigningError("Invalid private key", step=PipelineStep.SIGN) from None


def cancellation_digest(order_hash: str) -> bytes:
    """keccak256 over the order hash packed as a single bytes32."""

    if not is_bytes32_hex(order_hash):
        raise SigningError("Order hash must be a 0x-prefixed 32-byte hex value", step=PipelineStep.CANCEL)
    return keccak(to_bytes(hexstr=order_hash))


class SigningAdapter:
    """Wraps chain-bound signers for order and cancellation signatures."""

    def __init__(self, cache: ChainResourceCache) -> None:
        self.cache = cache

    def signer_address(self, private_key: str, chain_id: int) -> str:
        return self.cache.signer(private_key, chain_id).address

    def sign_typed_data(self, typed_data: Dict[str, Any], *, private_key: str, chain_id: int) -> str:
        domain_chain = typed_data.get("domain", {}).get("chainId")
        if domain_chain != chain_id:
            raise SigningError(
                f"Typed-data domain chain {domain_chain} does not match signer chain {chain_id}",
                step=PipelineStep.SIGN,
            )
        signer = self.cache.signer(private_key, chain_id)
        try:
            signable = encode_typed_data(full_message=typed_data)
            signed = signer.account.sign_message(signable)
        except (ValueError, TypeError) as exc:
            raise SigningError(f"Could not sign typed data: {exc}", step=PipelineStep.SIGN) from exc
        return to_hex(signed.signature)

    def sign_order(
        self,
        order: LimitOrder,
        domain: TypedDataDomain,
        *,
        private_key: str,
    ) -> str:
        """EIP-712 signature over ``order``; the domain chain is the source chain."""
        return self.sign_typed_data(
            build_typed_data(domain, order),
            private_key=private_key,
            chain_id=domain.chain_id,
        )

    def sign_cancellation(self, order_hash: str, *, private_key: str, chain_id: int) -> str:
        """Personal-message signature over the cancellation digest."""
        digest = cancellation_digest(order_hash)
        signer = self.cache.signer(private_key, chain_id)
        signed = signer.account.sign_message(encode_defunct(primitive=digest))
        return to_hex(signed.signature)


def recover_order_signer(order: LimitOrder, domain: TypedDataDomain, signature: str) -> str:
    """Address that produced ``signature`` over ``order``."""
    signable = encode_typed_data(full_message=build_typed_data(domain, order))
    return Account.recover_message(signable, signature=signature)


def recover_cancellation_signer(order_hash: str, signature: str) -> str:
    digest = cancellation_digest(order_hash)
    return Account.recover_message(encode_defunct(primitive=digest), signature=signature)


__all__ = [
    "ChainSigner",
    "ChainResourceCache",
    "SigningAdapter",
    "cancellation_digest",
    "recover_order_signer",
    "recover_cancellation_signer",
]
