"""Compile validated requests into immutable transaction plans.

A ``TransactionPlan`` describes a ledger transaction without touching the
SDK: the builder kind, the ordered setter calls, the transfer lines in
smallest units and the extra keys that must sign. ``executor.execute_plan``
turns a plan into a real SDK transaction.
"""

import logging
import re
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from hedera_wallet.exceptions import InvalidParams, UnsupportedOperation
from hedera_wallet.schemas import (
    ApproveAllowanceRequest,
    AssociateTokensRequest,
    BurnTokenRequest,
    CallContractRequest,
    CreateContractRequest,
    CreateTokenRequest,
    CreateTopicRequest,
    DeleteAccountRequest,
    DeleteAllowanceRequest,
    DeleteContractRequest,
    DeleteTokenRequest,
    DeleteTopicRequest,
    DissociateTokensRequest,
    EnableKycRequest,
    EthereumTransactionRequest,
    FreezeAccountRequest,
    MintTokenRequest,
    OperationRequest,
    PauseTokenRequest,
    SimpleTransfer,
    StakeHbarRequest,
    SubmitMessageRequest,
    UpdateContractRequest,
    UpdateTokenFeeScheduleRequest,
    UpdateTokenRequest,
    UpdateTopicRequest,
    WipeTokenRequest,
)
from hedera_wallet.types import HBAR_ASSET, HBAR_DECIMALS, AssetType, ResultKind

logger = logging.getLogger(__name__)

EVM_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
HBAR_QUANTUM = Decimal("0.00000001")


class BuilderCall(BaseModel):
    """One setter call applied to the SDK builder."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    args: tuple[Any, ...] = ()


class TransferLine(BaseModel):
    """Signed hbar or token amount for one account, in smallest units."""

    model_config = ConfigDict(frozen=True)

    asset_type: AssetType
    asset: str  # "HBAR" or token id
    account_id: str
    amount: int
    approved: bool = False


class NftMove(BaseModel):
    """Movement of one NFT serial between two accounts."""

    model_config = ConfigDict(frozen=True)

    nft_id: str  # tokenId/serial
    sender: str
    receiver: str
    approved: bool = False


class TransactionPlan(BaseModel):
    """Immutable description of a ledger transaction."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: str
    calls: tuple[BuilderCall, ...] = ()
    transfers: tuple[TransferLine, ...] = ()
    nft_moves: tuple[NftMove, ...] = ()
    signers: tuple[Any, ...] = ()
    scheduled: Optional["TransactionPlan"] = None
    result_kind: ResultKind = ResultKind.RECEIPT

    def net_amounts(self) -> dict[str, int]:
        """Sum of hbar and token lines per asset. Balanced plans net to zero."""
        totals: dict[str, int] = defaultdict(int)
        for line in self.transfers:
            totals[line.asset] += line.amount
        return dict(totals)

    def calls_named(self, method: str) -> list[BuilderCall]:
        return [call for call in self.calls if call.method == method]


class CompileContext(BaseModel):
    """Operator identity and keys available while compiling."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    operator_account_id: str
    operator_public_key: Any = None
    signing_key: Any = None


def to_smallest_unit(amount: Decimal, decimals: int) -> int:
    """Convert a human-readable amount into integer smallest units."""
    scaled = Decimal(amount) * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_HALF_UP))


def to_hbar(amount: Decimal) -> Decimal:
    """Round an hbar amount to whole tinybars."""
    return Decimal(amount).quantize(HBAR_QUANTUM, rounding=ROUND_HALF_UP)


def resolve_account_id(value: str) -> str:
    """Map an EVM address onto its ``0.0.<hex>`` account alias."""
    if EVM_ADDRESS_PATTERN.match(value):
        return f"0.0.{value[2:].lower()}"
    return value


def clean_memo(memo: Optional[str]) -> str:
    return " ".join((memo or "").splitlines()).strip()


def transfer_decimals(transfer: SimpleTransfer) -> int:
    """Precision of a transfer's asset.

    Raises:
        InvalidParams: If a token or NFT transfer has no resolved precision
    """
    if transfer.asset_type == AssetType.HBAR:
        return HBAR_DECIMALS
    if transfer.decimals is None:
        raise InvalidParams(
            message=f"Could not resolve decimals for {transfer.asset_id}",
            details={"asset_id": transfer.asset_id},
        )
    return transfer.decimals


def transaction_calls(memo: Optional[str], max_fee: Optional[Decimal]) -> list[BuilderCall]:
    """Setter calls shared by every transaction: memo and max fee."""
    calls = []
    memo = clean_memo(memo)
    if memo:
        calls.append(BuilderCall(method="set_transaction_memo", args=(memo,)))
    if max_fee is not None:
        calls.append(BuilderCall(method="set_max_transaction_fee", args=(to_hbar(max_fee),)))
    return calls


class TransferListBuilder:
    """Accumulates balanced transfer lines for one transfer transaction.

    A transfer that carries a service fee is converted to smallest units
    once, fee included, so its payer is debited exactly the requested
    amount. The fee part is withheld from the receiver and credited to the
    collector by ``fees``.
    """

    def __init__(self) -> None:
        self.lines: list[TransferLine] = []
        self.nft_moves: list[NftMove] = []
        self._withheld: dict[tuple[AssetType, str, str], int] = defaultdict(int)

    def move(
        self,
        transfer: SimpleTransfer,
        sender: str,
        receiver: str,
        approved: bool = False,
        fee_payer: Optional[str] = None,
    ) -> None:
        """Move ``transfer.amount`` of its asset from sender to receiver.

        Args:
            transfer: Transfer with resolved decimals
            sender: Debited account
            receiver: Credited account
            approved: Debit the sender through its allowance
            fee_payer: Account paying the transfer's service fee; defaults
                to the sender
        """
        decimals = transfer_decimals(transfer)
        sender = resolve_account_id(sender)
        receiver = resolve_account_id(receiver)

        if transfer.asset_type == AssetType.NFT:
            self.nft_moves.append(
                NftMove(
                    nft_id=transfer.asset_id,
                    sender=sender,
                    receiver=receiver,
                    approved=approved,
                )
            )
            return

        fee = Decimal(transfer.service_fee or 0)
        if fee <= 0:
            units = to_smallest_unit(transfer.amount, decimals)
            self._pair(transfer.asset_type, transfer.asset_key, units, sender, receiver, approved)
            return

        total_units = to_smallest_unit(transfer.amount + fee, decimals)
        fee_units = min(to_smallest_unit(fee, decimals), total_units)
        self._pair(
            transfer.asset_type,
            transfer.asset_key,
            total_units - fee_units,
            sender,
            receiver,
            approved,
        )
        payer = resolve_account_id(fee_payer) if fee_payer else sender
        self._withheld[(transfer.asset_type, transfer.asset_key, payer)] += fee_units

    def fees(self, collector: str) -> None:
        """Credit the collector with every strictly positive withheld fee."""
        collector = resolve_account_id(collector)
        for (asset_type, asset, payer), units in self._withheld.items():
            if units > 0:
                self._pair(asset_type, asset, units, payer, collector)
        self._withheld.clear()

    def service_fee(self, fee: Decimal, collector: str, payer: str) -> None:
        """Collect a standalone hbar fee from ``payer``."""
        units = to_smallest_unit(fee, HBAR_DECIMALS)
        if units > 0:
            self._pair(
                AssetType.HBAR,
                HBAR_ASSET,
                units,
                resolve_account_id(payer),
                resolve_account_id(collector),
            )

    def _pair(
        self,
        asset_type: AssetType,
        asset: str,
        units: int,
        sender: str,
        receiver: str,
        approved: bool = False,
    ) -> None:
        self.lines.append(
            TransferLine(asset_type=asset_type, asset=asset, account_id=receiver, amount=units)
        )
        self.lines.append(
            TransferLine(
                asset_type=asset_type,
                asset=asset,
                account_id=sender,
                amount=-units,
                approved=approved,
            )
        )

    def build(
        self,
        memo: Optional[str] = None,
        max_fee: Optional[Decimal] = None,
        result_kind: ResultKind = ResultKind.RECEIPT,
    ) -> TransactionPlan:
        return TransactionPlan(
            kind="TransferTransaction",
            calls=tuple(transaction_calls(memo, max_fee)),
            transfers=tuple(self.lines),
            nft_moves=tuple(self.nft_moves),
            result_kind=result_kind,
        )


def compile_transfers(
    transfers: Iterable[SimpleTransfer],
    operator_account_id: str,
    fee_collector: Optional[str] = None,
    memo: Optional[str] = None,
    max_fee: Optional[Decimal] = None,
    result_kind: ResultKind = ResultKind.RECEIPT,
) -> TransactionPlan:
    """Compile a transfer list into one atomic transfer transaction.

    Each transfer credits its destination and debits the operator, or the
    delegating owner through an approved debit when ``from`` is set. The
    operator pays every service fee: the fee part of each transfer is
    credited to ``fee_collector``, or left untransferred when it is unset.

    Args:
        transfers: Normalized transfers with resolved decimals
        operator_account_id: Current account
        fee_collector: Account credited with the fees
        memo: Transaction memo
        max_fee: Max transaction fee in hbar
        result_kind: Whether to fetch the receipt or the record

    Returns:
        TransactionPlan whose amounts net to zero per asset

    Raises:
        InvalidParams: If a token or NFT transfer has unresolved decimals
    """
    builder = TransferListBuilder()
    for transfer in transfers:
        if transfer.is_delegated:
            builder.move(
                transfer,
                sender=transfer.from_,
                receiver=transfer.to,
                approved=True,
                fee_payer=operator_account_id,
            )
        else:
            builder.move(transfer, sender=operator_account_id, receiver=transfer.to)

    if fee_collector:
        builder.fees(fee_collector)

    return builder.build(memo=memo, max_fee=max_fee, result_kind=result_kind)


def compile_service_fee_transfer(
    service_fee: Decimal,
    fee_collector: str,
    operator_account_id: str,
) -> TransactionPlan:
    """Fee-only hbar transfer collecting a service fee after a paid query."""
    builder = TransferListBuilder()
    builder.service_fee(service_fee, collector=fee_collector, payer=operator_account_id)
    return builder.build()


# Single-purpose operations

Compiler = Callable[[Any, CompileContext], TransactionPlan]
COMPILERS: dict[str, Compiler] = {}


def compiles(kind: str) -> Callable[[Compiler], Compiler]:
    def register(func: Compiler) -> Compiler:
        COMPILERS[kind] = func
        return func

    return register


def compile_operation(operation: OperationRequest, context: CompileContext) -> TransactionPlan:
    """Compile a single-purpose operation by dispatching on its kind.

    Raises:
        UnsupportedOperation: If no compiler handles the operation kind
        InvalidParams: If the operation lacks information needed to compile
    """
    compiler = COMPILERS.get(operation.kind)
    if compiler is None:
        raise UnsupportedOperation(
            message=f"Unsupported operation: {operation.kind}",
            details={"kind": operation.kind},
        )
    plan = compiler(operation, context)
    logger.debug(f"Compiled {operation.kind} into {plan.kind}")
    return plan


def _plan(
    kind: str,
    operation: OperationRequest,
    calls: list[BuilderCall],
    signers: tuple[Any, ...] = (),
) -> TransactionPlan:
    return TransactionPlan(
        kind=kind,
        calls=tuple(transaction_calls(operation.transaction_memo, operation.max_fee) + calls),
        signers=tuple(key for key in signers if key is not None),
        result_kind=operation.result_kind,
    )


def _call(method: str, *args: Any) -> BuilderCall:
    return BuilderCall(method=method, args=args)


def _optional_calls(pairs: Iterable[tuple[str, Any]]) -> list[BuilderCall]:
    return [_call(method, value) for method, value in pairs if value is not None]


def _token_units(operation: Any) -> int:
    if operation.decimals is None:
        raise InvalidParams(
            message=f"Could not resolve decimals for {operation.token_id}",
            details={"token_id": operation.token_id},
        )
    return to_smallest_unit(operation.amount, operation.decimals)


def _amount_or_serials(operation: Any) -> BuilderCall:
    if operation.asset_type == "NFT":
        return _call("set_serials", tuple(operation.serial_numbers))
    return _call("set_amount", _token_units(operation))


@compiles("mint_token")
def compile_mint_token(operation: MintTokenRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_token_id", operation.token_id)]
    if operation.asset_type == "NFT":
        calls.append(_call("set_metadata", tuple(m.encode() for m in operation.metadata)))
    else:
        calls.append(_call("set_amount", _token_units(operation)))
    return _plan("TokenMintTransaction", operation, calls)


@compiles("burn_token")
def compile_burn_token(operation: BurnTokenRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_token_id", operation.token_id), _amount_or_serials(operation)]
    return _plan("TokenBurnTransaction", operation, calls)


@compiles("wipe_token")
def compile_wipe_token(operation: WipeTokenRequest, context: CompileContext) -> TransactionPlan:
    calls = [
        _call("set_token_id", operation.token_id),
        _call("set_account_id", resolve_account_id(operation.account_id)),
        _amount_or_serials(operation),
    ]
    return _plan("TokenWipeTransaction", operation, calls)


@compiles("freeze_account")
def compile_freeze_account(
    operation: FreezeAccountRequest, context: CompileContext
) -> TransactionPlan:
    kind = "TokenFreezeTransaction" if operation.freeze else "TokenUnfreezeTransaction"
    calls = [
        _call("set_token_id", operation.token_id),
        _call("set_account_id", resolve_account_id(operation.account_id)),
    ]
    return _plan(kind, operation, calls)


@compiles("enable_kyc")
def compile_enable_kyc(operation: EnableKycRequest, context: CompileContext) -> TransactionPlan:
    kind = "TokenGrantKycTransaction" if operation.enable else "TokenRevokeKycTransaction"
    calls = [
        _call("set_token_id", operation.token_id),
        _call("set_account_id", resolve_account_id(operation.account_id)),
    ]
    return _plan(kind, operation, calls)


@compiles("pause_token")
def compile_pause_token(operation: PauseTokenRequest, context: CompileContext) -> TransactionPlan:
    kind = "TokenPauseTransaction" if operation.pause else "TokenUnpauseTransaction"
    return _plan(kind, operation, [_call("set_token_id", operation.token_id)])


@compiles("associate_tokens")
def compile_associate_tokens(
    operation: AssociateTokensRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_account_id", context.operator_account_id),
        _call("set_token_ids", tuple(operation.token_ids)),
    ]
    return _plan("TokenAssociateTransaction", operation, calls)


@compiles("dissociate_tokens")
def compile_dissociate_tokens(
    operation: DissociateTokensRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_account_id", context.operator_account_id),
        _call("set_token_ids", tuple(operation.token_ids)),
    ]
    return _plan("TokenDissociateTransaction", operation, calls)


@compiles("create_token")
def compile_create_token(operation: CreateTokenRequest, context: CompileContext) -> TransactionPlan:
    """Create a token with the operator as treasury and admin."""
    token_type = "FUNGIBLE_COMMON" if operation.asset_type == "TOKEN" else "NON_FUNGIBLE_UNIQUE"
    calls = [
        _call("set_admin_key", context.operator_public_key),
        _call("set_treasury_account_id", context.operator_account_id),
        _call("set_token_type", token_type),
        _call("set_token_name", operation.name),
        _call("set_token_symbol", operation.symbol),
        _call("set_decimals", operation.decimals),
        _call("set_supply_type", operation.supply_type),
        _call("set_initial_supply", to_smallest_unit(operation.initial_supply, operation.decimals)),
        _call("set_auto_renew_account_id", context.operator_account_id),
        _call("set_token_memo", clean_memo(operation.token_memo)),
        _call("set_freeze_default", operation.freeze_default),
    ]
    if operation.max_supply is not None:
        calls.append(
            _call("set_max_supply", to_smallest_unit(operation.max_supply, operation.decimals))
        )
    calls += _optional_calls(
        [
            ("set_expiration_time", operation.expiration_time),
            ("set_auto_renew_period", operation.auto_renew_period),
            ("set_kyc_key", operation.kyc_public_key),
            ("set_freeze_key", operation.freeze_public_key),
            ("set_pause_key", operation.pause_public_key),
            ("set_wipe_key", operation.wipe_public_key),
            ("set_supply_key", operation.supply_public_key),
            ("set_fee_schedule_key", operation.fee_schedule_public_key),
        ]
    )
    if operation.custom_fees:
        calls.append(_call("set_custom_fees", tuple(operation.custom_fees)))
    return _plan("TokenCreateTransaction", operation, calls, signers=(context.signing_key,))


@compiles("update_token")
def compile_update_token(operation: UpdateTokenRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_token_id", operation.token_id)]
    calls += _optional_calls(
        [
            ("set_token_name", operation.name),
            ("set_token_symbol", operation.symbol),
            (
                "set_treasury_account_id",
                resolve_account_id(operation.treasury_account_id)
                if operation.treasury_account_id
                else None,
            ),
            ("set_admin_key", operation.admin_public_key),
            ("set_kyc_key", operation.kyc_public_key),
            ("set_freeze_key", operation.freeze_public_key),
            ("set_pause_key", operation.pause_public_key),
            ("set_wipe_key", operation.wipe_public_key),
            ("set_supply_key", operation.supply_public_key),
            ("set_fee_schedule_key", operation.fee_schedule_public_key),
            (
                "set_token_memo",
                clean_memo(operation.token_memo) if operation.token_memo is not None else None,
            ),
            ("set_expiration_time", operation.expiration_time),
            ("set_auto_renew_account_id", operation.auto_renew_account_id),
            ("set_auto_renew_period", operation.auto_renew_period),
        ]
    )
    return _plan("TokenUpdateTransaction", operation, calls, signers=(context.signing_key,))


@compiles("delete_token")
def compile_delete_token(operation: DeleteTokenRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_token_id", operation.token_id)]
    return _plan("TokenDeleteTransaction", operation, calls, signers=(context.signing_key,))


@compiles("update_token_fee_schedule")
def compile_update_token_fee_schedule(
    operation: UpdateTokenFeeScheduleRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_token_id", operation.token_id),
        _call("set_custom_fees", tuple(operation.custom_fees)),
    ]
    return _plan(
        "TokenFeeScheduleUpdateTransaction", operation, calls, signers=(context.signing_key,)
    )


@compiles("approve_allowance")
def compile_approve_allowance(
    operation: ApproveAllowanceRequest, context: CompileContext
) -> TransactionPlan:
    owner = context.operator_account_id
    spender = resolve_account_id(operation.spender_account_id)

    if operation.asset_type == AssetType.HBAR:
        calls = [_call("approve_hbar_allowance", owner, spender, to_hbar(operation.amount))]
    elif operation.asset_type == AssetType.TOKEN:
        if operation.decimals is None:
            raise InvalidParams(
                message=f"Could not resolve decimals for {operation.asset_id}",
                details={"asset_id": operation.asset_id},
            )
        units = to_smallest_unit(operation.amount, operation.decimals)
        calls = [_call("approve_token_allowance", operation.asset_id, owner, spender, units)]
    elif operation.all_serials:
        calls = [
            _call("approve_token_nft_allowance_all_serials", operation.asset_id, owner, spender)
        ]
    else:
        calls = [
            _call("approve_token_nft_allowance", f"{operation.asset_id}/{serial}", owner, spender)
            for serial in operation.serial_numbers
        ]
    return _plan("AccountAllowanceApproveTransaction", operation, calls)


@compiles("delete_allowance")
def compile_delete_allowance(
    operation: DeleteAllowanceRequest, context: CompileContext
) -> TransactionPlan:
    """Revoke an allowance; fungible allowances are revoked by approving zero."""
    owner = context.operator_account_id

    if operation.asset_type == AssetType.NFT:
        calls = [_call("delete_all_token_nft_allowances", operation.asset_id, owner)]
        return _plan("AccountAllowanceDeleteTransaction", operation, calls)

    spender = resolve_account_id(operation.spender_account_id)
    if operation.asset_type == AssetType.HBAR:
        calls = [_call("approve_hbar_allowance", owner, spender, Decimal(0))]
    else:
        calls = [_call("approve_token_allowance", operation.asset_id, owner, spender, 0)]
    return _plan("AccountAllowanceApproveTransaction", operation, calls)


@compiles("delete_account")
def compile_delete_account(
    operation: DeleteAccountRequest, context: CompileContext
) -> TransactionPlan:
    if resolve_account_id(operation.transfer_account_id) == context.operator_account_id:
        raise InvalidParams(
            message="Cannot transfer the remaining balance to the account being deleted",
            details={"transfer_account_id": operation.transfer_account_id},
        )
    calls = [
        _call("set_account_id", context.operator_account_id),
        _call("set_transfer_account_id", resolve_account_id(operation.transfer_account_id)),
    ]
    return _plan("AccountDeleteTransaction", operation, calls)


@compiles("stake_hbar")
def compile_stake_hbar(operation: StakeHbarRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_account_id", context.operator_account_id)]
    if operation.is_unstake:
        calls.append(_call("clear_staked_node_id"))
    elif operation.node_id is not None:
        calls.append(_call("set_staked_node_id", operation.node_id))
    else:
        calls.append(_call("set_staked_account_id", resolve_account_id(operation.account_id)))
    return _plan("AccountUpdateTransaction", operation, calls)


@compiles("create_topic")
def compile_create_topic(operation: CreateTopicRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_topic_memo", clean_memo(operation.topic_memo))]
    if operation.admin_key:
        calls.append(_call("set_admin_key", context.operator_public_key))
    if operation.submit_key:
        calls.append(_call("set_submit_key", context.operator_public_key))
    calls += _optional_calls([("set_auto_renew_period", operation.auto_renew_period)])
    return _plan("TopicCreateTransaction", operation, calls)


@compiles("update_topic")
def compile_update_topic(operation: UpdateTopicRequest, context: CompileContext) -> TransactionPlan:
    calls = [_call("set_topic_id", operation.topic_id)]
    calls += _optional_calls(
        [
            (
                "set_topic_memo",
                clean_memo(operation.topic_memo) if operation.topic_memo is not None else None,
            ),
            ("set_admin_key", operation.admin_public_key),
            ("set_submit_key", operation.submit_public_key),
            ("set_auto_renew_account_id", operation.auto_renew_account_id),
            ("set_auto_renew_period", operation.auto_renew_period),
            ("set_expiration_time", operation.expiration_time),
        ]
    )
    return _plan("TopicUpdateTransaction", operation, calls, signers=(context.signing_key,))


@compiles("delete_topic")
def compile_delete_topic(operation: DeleteTopicRequest, context: CompileContext) -> TransactionPlan:
    return _plan("TopicDeleteTransaction", operation, [_call("set_topic_id", operation.topic_id)])


@compiles("submit_message")
def compile_submit_message(
    operation: SubmitMessageRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_topic_id", operation.topic_id),
        _call("set_message", operation.message.encode()),
    ]
    calls += _optional_calls(
        [
            ("set_max_chunks", operation.max_chunks),
            ("set_chunk_size", operation.chunk_size),
        ]
    )
    return _plan("TopicMessageSubmitTransaction", operation, calls)


def _hex_bytes(value: str, field: str = "bytecode") -> bytes:
    hex_value = value[2:] if value.startswith("0x") else value
    try:
        return bytes.fromhex(hex_value)
    except ValueError as e:
        raise InvalidParams(
            message=f"{field} must be hex encoded",
            details={field: value[:32]},
        ) from e


@compiles("create_contract")
def compile_create_contract(
    operation: CreateContractRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_gas", operation.gas),
        _call("set_bytecode", _hex_bytes(operation.bytecode)),
        _call("set_contract_memo", clean_memo(operation.contract_memo)),
    ]
    if operation.admin_key:
        calls.append(_call("set_admin_key", context.operator_public_key))
    if operation.constructor_parameters:
        calls.append(
            _call("set_constructor_parameters", tuple(operation.constructor_parameters))
        )
    calls += _optional_calls(
        [
            (
                "set_initial_balance",
                to_hbar(operation.initial_balance)
                if operation.initial_balance is not None
                else None,
            ),
            ("set_auto_renew_period", operation.auto_renew_period),
            ("set_max_automatic_token_associations", operation.max_automatic_token_associations),
        ]
    )
    return _plan("ContractCreateFlow", operation, calls)


@compiles("update_contract")
def compile_update_contract(
    operation: UpdateContractRequest, context: CompileContext
) -> TransactionPlan:
    calls = [_call("set_contract_id", operation.contract_id)]
    calls += _optional_calls(
        [
            ("set_admin_key", operation.admin_public_key),
            (
                "set_contract_memo",
                clean_memo(operation.contract_memo)
                if operation.contract_memo is not None
                else None,
            ),
            ("set_expiration_time", operation.expiration_time),
            ("set_auto_renew_period", operation.auto_renew_period),
            ("set_max_automatic_token_associations", operation.max_automatic_token_associations),
        ]
    )
    return _plan("ContractUpdateTransaction", operation, calls)


@compiles("delete_contract")
def compile_delete_contract(
    operation: DeleteContractRequest, context: CompileContext
) -> TransactionPlan:
    calls = [_call("set_contract_id", operation.contract_id)]
    if operation.transfer_account_id:
        calls.append(
            _call("set_transfer_account_id", resolve_account_id(operation.transfer_account_id))
        )
    else:
        calls.append(_call("set_transfer_contract_id", operation.transfer_contract_id))
    return _plan("ContractDeleteTransaction", operation, calls)


@compiles("call_contract")
def compile_call_contract(
    operation: CallContractRequest, context: CompileContext
) -> TransactionPlan:
    calls = [
        _call("set_contract_id", operation.contract_id),
        _call("set_gas", operation.gas),
        _call("set_function", operation.function_name, tuple(operation.function_parameters)),
    ]
    if operation.payable_amount is not None:
        calls.append(_call("set_payable_amount", to_hbar(operation.payable_amount)))
    return _plan("ContractExecuteTransaction", operation, calls)


@compiles("ethereum_transaction")
def compile_ethereum_transaction(
    operation: EthereumTransactionRequest, context: CompileContext
) -> TransactionPlan:
    calls = [_call("set_ethereum_data", _hex_bytes(operation.ethereum_data, "ethereum_data"))]
    calls += _optional_calls(
        [
            ("set_call_data_file_id", operation.call_data_file_id),
            (
                "set_max_gas_allowance_hbar",
                to_hbar(operation.max_gas_allowance)
                if operation.max_gas_allowance is not None
                else None,
            ),
        ]
    )
    return _plan("EthereumTransaction", operation, calls)
