"""Wallet state read and written by the confirmation facades."""

from typing import Protocol

from pydantic import BaseModel, Field

from hedera_wallet.exceptions import InvalidParams
from hedera_wallet.types import AccountBalance, AccountInfo


class KeyStore(BaseModel):
    """Keys of one account on one network."""

    curve: str = "ECDSA_SECP256K1"  # or ED25519
    private_key: str
    public_key: str
    address: str
    hedera_account_id: str = ""


class NetworkAccountState(BaseModel):
    """Per-network cached data of one EVM address."""

    key_store: KeyStore
    account_info: AccountInfo = Field(default_factory=AccountInfo)
    mirror_node_url: str = ""


class CurrentAccount(BaseModel):
    """The account the wallet is acting as."""

    hedera_account_id: str = ""
    hedera_evm_address: str
    network: str = "testnet"
    mirror_node_url: str = ""
    balance: AccountBalance = Field(default_factory=AccountBalance)


class WalletState(BaseModel):
    """Persistent wallet state."""

    current_account: CurrentAccount
    # evm address -> network -> state
    account_state: dict[str, dict[str, NetworkAccountState]] = Field(default_factory=dict)

    def network_state(self) -> NetworkAccountState:
        """State of the current account on its current network.

        Raises:
            InvalidParams: If the current account has no state on its network
        """
        account = self.current_account
        state = self.account_state.get(account.hedera_evm_address, {}).get(account.network)
        if state is None:
            raise InvalidParams(
                message="No account state for the current account on this network",
                details={
                    "evm_address": account.hedera_evm_address,
                    "network": account.network,
                },
            )
        return state


class StateStore(Protocol):
    """Host-provided storage of ``WalletState``."""

    def get_state(self) -> WalletState:
        ...

    async def update_state(self, state: WalletState) -> None:
        ...
