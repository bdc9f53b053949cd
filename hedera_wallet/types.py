"""Result and data types produced by the wallet core."""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

HBAR_ASSET = "HBAR"
HBAR_DECIMALS = 8


class AssetType(str, Enum):
    """Kinds of asset a transfer can move."""

    HBAR = "HBAR"
    TOKEN = "TOKEN"
    NFT = "NFT"


class ResultKind(str, Enum):
    """What a caller wants back after a transaction reaches consensus."""

    RECEIPT = "receipt"
    RECORD = "record"


class QueryCost(BaseModel):
    """Fee breakdown for a paid ledger query."""

    service_fee: Decimal
    max_cost: Decimal


class TxReceiptExchangeRate(BaseModel):
    """Exchange rate reported in a receipt."""

    hbars: int = 0
    cents: int = 0
    expiration_time: str = ""
    exchange_rate_in_cents: float = 0.0


class TxReceipt(BaseModel):
    """Normalized transaction receipt. Every field is always present."""

    status: str = ""
    account_id: str = ""
    file_id: str = ""
    contract_id: str = ""
    topic_id: str = ""
    token_id: str = ""
    schedule_id: str = ""
    exchange_rate: dict[str, Any] = Field(default_factory=dict)
    topic_sequence_number: str = ""
    topic_running_hash: str = ""
    total_supply: str = ""
    scheduled_transaction_id: str = ""
    serials: list[str] = Field(default_factory=list)
    duplicates: list["TxReceipt"] = Field(default_factory=list)
    children: list["TxReceipt"] = Field(default_factory=list)


class TxRecordTransfer(BaseModel):
    """Single hbar movement reported in a record."""

    account_id: str
    amount: str  # tinybars as string
    is_approved: bool = False


class TxRecord(BaseModel):
    """Normalized transaction record. Every field is always present."""

    receipt: TxReceipt = Field(default_factory=TxReceipt)
    transaction_hash: str = ""
    consensus_timestamp: str = ""
    transaction_id: str = ""
    transaction_memo: str = ""
    transaction_fee: str = ""
    transfers: list[TxRecordTransfer] = Field(default_factory=list)
    contract_function_result: dict[str, Any] = Field(default_factory=dict)
    token_transfers: dict[str, dict[str, str]] = Field(default_factory=dict)
    token_transfers_list: list[dict[str, Any]] = Field(default_factory=list)
    schedule_ref: str = ""
    assessed_custom_fees: list[dict[str, Any]] = Field(default_factory=list)
    nft_transfers: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    automatic_token_associations: list[dict[str, Any]] = Field(default_factory=list)
    parent_consensus_timestamp: str = ""
    alias_key: str = ""
    duplicates: list["TxRecord"] = Field(default_factory=list)
    children: list["TxRecord"] = Field(default_factory=list)
    ethereum_hash: str = ""
    paid_staking_rewards: list[TxRecordTransfer] = Field(default_factory=list)
    prng_bytes: str = ""
    prng_number: str = ""
    evm_address: str = ""


class TokenBalance(BaseModel):
    """Cached balance of one token (or one NFT serial) held by an account."""

    balance: Decimal = Decimal(0)
    decimals: int = 0
    token_id: str
    nft_serial_number: str = ""
    name: str = ""
    symbol: str = ""
    token_type: str = ""
    supply_type: str = ""
    total_supply: str = ""
    max_supply: str = ""


class AccountBalance(BaseModel):
    """Cached account balance, hbars in whole units."""

    hbars: Decimal = Decimal(0)
    timestamp: str = ""
    tokens: dict[str, TokenBalance] = Field(default_factory=dict)


class StakingInfo(BaseModel):
    """Staking details of an account."""

    decline_staking_reward: bool = False
    stake_period_start: str = ""
    pending_reward: str = ""
    staked_to_me: str = ""
    staked_account_id: str = ""
    staked_node_id: str = ""


class AccountInfo(BaseModel):
    """Account information from the mirror node or a paid ledger query."""

    account_id: str = ""
    alias: str = ""
    created_time: str = ""
    expiration_time: str = ""
    memo: str = ""
    evm_address: str = ""
    key: dict[str, str] = Field(default_factory=dict)
    balance: AccountBalance = Field(default_factory=AccountBalance)
    auto_renew_period: str = ""
    ethereum_nonce: str = ""
    is_deleted: bool = False
    staking_info: StakingInfo = Field(default_factory=StakingInfo)


class TopicInfo(BaseModel):
    """Consensus topic details from a paid ledger query."""

    topic_id: str = ""
    memo: str = ""
    running_hash: str = ""
    sequence_number: str = ""
    expiration_time: str = ""
    admin_key: str = ""
    submit_key: str = ""
    auto_renew_account_id: str = ""
    auto_renew_period: str = ""
    ledger_id: str = ""


class ContractInfo(BaseModel):
    """Smart contract details from a paid ledger query."""

    contract_id: str = ""
    account_id: str = ""
    contract_account_id: str = ""
    admin_key: str = ""
    expiration_time: str = ""
    auto_renew_period: str = ""
    auto_renew_account_id: str = ""
    storage: str = ""
    contract_memo: str = ""
    balance: Decimal = Decimal(0)
    is_deleted: bool = False
    token_relationships: dict[str, Any] = Field(default_factory=dict)
    ledger_id: str = ""
    staking_info: dict[str, Any] = Field(default_factory=dict)


class ContractBytecode(BaseModel):
    """Runtime bytecode of a contract, hex encoded."""

    contract_id: str = ""
    bytecode: str = ""


class ContractCallResult(BaseModel):
    """Result of a read-only contract function call."""

    contract_id: str = ""
    function_name: str = ""
    gas_used: str = ""
    result: dict[str, Any] = Field(default_factory=dict)


class MirrorTokenInfo(BaseModel):
    """Token metadata as served by the mirror node."""

    token_id: str
    name: str = ""
    symbol: str = ""
    type: str = ""  # FUNGIBLE_COMMON, NON_FUNGIBLE_UNIQUE
    decimals: int = 0
    supply_type: str = ""
    total_supply: str = "0"
    max_supply: str = "0"
    treasury_account_id: Optional[str] = None
    memo: str = ""
    deleted: bool = False

    @property
    def is_nft(self) -> bool:
        return self.type == "NON_FUNGIBLE_UNIQUE"


class MirrorNftInfo(BaseModel):
    """NFT serial owned by an account, as served by the mirror node."""

    token_id: str
    serial_number: str
    account_id: str = ""
    metadata: str = ""
    deleted: bool = False
