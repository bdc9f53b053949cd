"""Mirror node REST client."""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional

import httpx

from hedera_wallet.core.config import settings
from hedera_wallet.exceptions import ResourceUnavailable
from hedera_wallet.services.receipts import format_timestamp
from hedera_wallet.types import (
    AccountBalance,
    AccountInfo,
    MirrorNftInfo,
    MirrorTokenInfo,
    StakingInfo,
    TokenBalance,
)

logger = logging.getLogger(__name__)

TINYBARS_PER_HBAR = Decimal(100_000_000)


def _scaled(value: Any, decimals: int) -> Decimal:
    return Decimal(str(value or 0)) / (Decimal(10) ** decimals)


class MirrorNodeClient:
    """Async client for the public mirror node REST API.

    Failures are reported, never retried: the caller decides whether to ask
    again.

    Args:
        base_url: Mirror node URL, e.g. https://testnet.mirrornode.hedera.com
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.MIRROR_TIMEOUT
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def for_network(cls, network: str, **kwargs: Any) -> "MirrorNodeClient":
        """Client for the public mirror node of a network."""
        return cls(settings.mirror_node_url(network), **kwargs)

    async def __aenter__(self) -> "MirrorNodeClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """GET a mirror node path.

        Args:
            path: API path
            params: Query parameters

        Returns:
            Response data as dictionary

        Raises:
            ResourceUnavailable: If the request fails or returns an error status
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Mirror node request to {url} failed: {e}")
            raise ResourceUnavailable(
                message=f"Mirror node request failed: {e}",
                details={"url": url},
            ) from e

        if response.status_code >= 400:
            logger.error(f"Mirror node returned {response.status_code} for {url}")
            raise ResourceUnavailable(
                message=f"Mirror node returned {response.status_code}",
                details={"url": url, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResourceUnavailable(
                message="Mirror node returned malformed JSON",
                details={"url": url},
            ) from e

    async def get_token_by_id(self, token_id: str) -> MirrorTokenInfo:
        """Get token metadata.

        Args:
            token_id: Token ID

        Returns:
            MirrorTokenInfo
        """
        data = await self._request(f"/api/v1/tokens/{token_id}")
        return MirrorTokenInfo(
            token_id=data.get("token_id") or token_id,
            name=data.get("name") or "",
            symbol=data.get("symbol") or "",
            type=data.get("type") or "",
            decimals=int(data.get("decimals") or 0),
            supply_type=data.get("supply_type") or "",
            total_supply=str(data.get("total_supply") or "0"),
            max_supply=str(data.get("max_supply") or "0"),
            treasury_account_id=data.get("treasury_account_id"),
            memo=data.get("memo") or "",
            deleted=bool(data.get("deleted")),
        )

    async def get_nft_serial_numbers(
        self,
        token_id: str,
        account_id: str,
    ) -> list[MirrorNftInfo]:
        """Get the serials of an NFT collection owned by an account.

        Args:
            token_id: NFT token ID
            account_id: Owner account ID

        Returns:
            List of owned serials
        """
        data = await self._request(
            f"/api/v1/tokens/{token_id}/nfts",
            params={"account.id": account_id},
        )
        return [
            MirrorNftInfo(
                token_id=nft.get("token_id") or token_id,
                serial_number=str(nft.get("serial_number", "")),
                account_id=nft.get("account_id") or account_id,
                metadata=nft.get("metadata") or "",
                deleted=bool(nft.get("deleted")),
            )
            for nft in data.get("nfts", [])
        ]

    async def _token_balances(
        self,
        account_id: str,
        token: dict[str, Any],
    ) -> dict[str, TokenBalance]:
        token_id = token["token_id"]
        info = await self.get_token_by_id(token_id)
        common = {
            "token_id": token_id,
            "name": info.name,
            "symbol": info.symbol,
            "token_type": info.type,
            "supply_type": info.supply_type,
            "total_supply": str(_scaled(info.total_supply, info.decimals)),
            "max_supply": str(_scaled(info.max_supply, info.decimals)),
        }

        if not info.is_nft:
            return {
                token_id: TokenBalance(
                    balance=_scaled(token.get("balance"), info.decimals),
                    decimals=info.decimals,
                    **common,
                )
            }

        nfts = await self.get_nft_serial_numbers(token_id, account_id)
        return {
            f"{token_id}/{nft.serial_number}": TokenBalance(
                balance=Decimal(1),
                decimals=0,
                nft_serial_number=nft.serial_number,
                **common,
            )
            for nft in nfts
        }

    async def get_account_info(self, account_id: str) -> AccountInfo:
        """Get account information with token balances resolved.

        Args:
            account_id: Account ID, alias or EVM address

        Returns:
            AccountInfo with hbars in whole units and tokens keyed by token
            ID (``tokenId/serial`` for NFTs)
        """
        data = await self._request(f"/api/v1/accounts/{account_id}")
        resolved_id = data.get("account") or account_id
        balance = data.get("balance") or {}

        token_balances = await asyncio.gather(
            *(self._token_balances(resolved_id, token) for token in balance.get("tokens", []))
        )
        tokens: dict[str, TokenBalance] = {}
        for entry in token_balances:
            tokens.update(entry)

        key = data.get("key") or {}
        return AccountInfo(
            account_id=resolved_id,
            alias=data.get("alias") or "",
            created_time=format_timestamp(data.get("created_timestamp")),
            expiration_time=format_timestamp(data.get("expiry_timestamp")),
            memo=data.get("memo") or "",
            evm_address=data.get("evm_address") or "",
            key={"type": key.get("_type", ""), "key": key.get("key", "")} if key else {},
            balance=AccountBalance(
                hbars=Decimal(str(balance.get("balance") or 0)) / TINYBARS_PER_HBAR,
                timestamp=format_timestamp(balance.get("timestamp")),
                tokens=tokens,
            ),
            auto_renew_period=str(data.get("auto_renew_period") or ""),
            ethereum_nonce=str(data.get("ethereum_nonce") or ""),
            is_deleted=bool(data.get("deleted")),
            staking_info=StakingInfo(
                decline_staking_reward=bool(data.get("decline_reward")),
                stake_period_start=format_timestamp(data.get("stake_period_start")),
                pending_reward=str(data.get("pending_reward") or "0"),
                staked_to_me="0",
                staked_account_id=data.get("staked_account_id") or "",
                staked_node_id=str(data.get("staked_node_id") or ""),
            ),
        )
