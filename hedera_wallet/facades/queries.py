"""Paid ledger queries: topic and smart contract lookups.

Each query is quoted first, the user confirms its cost plus the service fee,
and the service fee is collected in a separate transfer once the answer is in.
"""

import logging
from decimal import Decimal
from typing import Any

from hedera_wallet.exceptions import LedgerRejected, WalletSnapError
from hedera_wallet.facades.base import ConfirmationFacade, RequestT, ResultT
from hedera_wallet.host import DialogNode, copyable, divider, heading, text
from hedera_wallet.ledger import LedgerClient, LedgerQuery
from hedera_wallet.schemas import (
    ContractBytecodeRequest,
    ContractFunctionRequest,
    ContractInfoRequest,
    TopicInfoRequest,
)
from hedera_wallet.services.compiler import compile_service_fee_transfer, resolve_account_id
from hedera_wallet.services.executor import execute_plan, ledger_status
from hedera_wallet.services.fees import calculate_fees
from hedera_wallet.services.receipts import (
    normalize_contract_bytecode,
    normalize_contract_call,
    normalize_contract_info,
    normalize_topic_info,
)
from hedera_wallet.services.summary import query_cost_lines
from hedera_wallet.types import (
    ContractBytecode,
    ContractCallResult,
    ContractInfo,
    QueryCost,
    TopicInfo,
)

logger = logging.getLogger(__name__)


class PaidQueryFacade(ConfirmationFacade[RequestT, ResultT]):
    """Template for a paid ledger query with a service fee on top.

    Subclasses set ``query_kind`` and implement ``query_params``,
    ``describe`` and ``normalize``.
    """

    query_kind: str = ""

    query: LedgerQuery
    params: dict[str, Any]
    cost: QueryCost

    def query_params(self, request: RequestT, client: LedgerClient) -> dict[str, Any]:
        raise NotImplementedError

    def describe(self, request: RequestT) -> list[DialogNode]:
        return []

    def normalize(self, request: RequestT, raw: Any, client: LedgerClient) -> ResultT:
        raise NotImplementedError

    @property
    def query_details(self) -> dict[str, Any]:
        return {key: value for key, value in self.params.items() if isinstance(value, str)}

    async def prepare(self, request: RequestT, client: LedgerClient) -> list[DialogNode]:
        """Quote the query and describe its cost."""
        self.params = self.query_params(request, client)
        self.query = client.query(self.query_kind, **self.params)
        try:
            base_cost = Decimal(str(await self.query.get_cost(client)))
        except WalletSnapError:
            raise
        except Exception as e:
            raise LedgerRejected(
                message=f"Could not get the cost of {self.query_kind}: {e}",
                status=ledger_status(e),
                details=self.query_details,
            ) from e

        self.cost = calculate_fees(base_cost, request.service_fee.percentage_cut)
        return [
            heading(self.title),
            text("Are you sure you want to pay for the following query?"),
            divider(),
            *self.describe(request),
            *query_cost_lines(base_cost, self.cost),
        ]

    async def execute(self, request: RequestT, client: LedgerClient) -> ResultT:
        """Pay for and run the query, then collect the service fee.

        Raises:
            LedgerRejected: If the query or the fee transfer fails
        """
        self.query.set_query_payment(self.cost.max_cost)
        try:
            raw = await self.query.execute(client)
        except WalletSnapError:
            raise
        except Exception as e:
            raise LedgerRejected(
                message=f"{self.query_kind} failed: {e}",
                status=ledger_status(e),
                details=self.query_details,
            ) from e

        result = self.normalize(request, raw, client)

        if self.cost.service_fee > 0:
            plan = compile_service_fee_transfer(
                self.cost.service_fee,
                fee_collector=request.service_fee.to_address,
                operator_account_id=client.operator_account_id,
            )
            await execute_plan(client, plan)
            logger.info(
                f"Collected {self.cost.service_fee} hbar service fee for {self.query_kind}"
            )
        return result


class TopicInfoFacade(PaidQueryFacade[TopicInfoRequest, TopicInfo]):
    title = "Get Topic Info"
    query_kind = "TopicInfoQuery"

    def query_params(self, request: TopicInfoRequest, client: LedgerClient) -> dict[str, Any]:
        return {"topic_id": request.topic_id}

    def describe(self, request: TopicInfoRequest) -> list[DialogNode]:
        return [text("Topic ID:"), copyable(request.topic_id)]

    def normalize(self, request: TopicInfoRequest, raw: Any, client: LedgerClient) -> TopicInfo:
        return normalize_topic_info(raw, topic_id=request.topic_id)


class ContractInfoFacade(PaidQueryFacade[ContractInfoRequest, ContractInfo]):
    title = "Get Smart Contract Info"
    query_kind = "ContractInfoQuery"

    def query_params(self, request: ContractInfoRequest, client: LedgerClient) -> dict[str, Any]:
        return {"contract_id": request.contract_id}

    def describe(self, request: ContractInfoRequest) -> list[DialogNode]:
        return [text("Contract ID:"), copyable(request.contract_id)]

    def normalize(
        self, request: ContractInfoRequest, raw: Any, client: LedgerClient
    ) -> ContractInfo:
        return normalize_contract_info(raw, contract_id=request.contract_id)


class ContractBytecodeFacade(PaidQueryFacade[ContractBytecodeRequest, ContractBytecode]):
    title = "Get Smart Contract Bytecode"
    query_kind = "ContractByteCodeQuery"

    def query_params(
        self, request: ContractBytecodeRequest, client: LedgerClient
    ) -> dict[str, Any]:
        return {"contract_id": request.contract_id}

    def describe(self, request: ContractBytecodeRequest) -> list[DialogNode]:
        return [text("Contract ID:"), copyable(request.contract_id)]

    def normalize(
        self, request: ContractBytecodeRequest, raw: Any, client: LedgerClient
    ) -> ContractBytecode:
        return normalize_contract_bytecode(raw, contract_id=request.contract_id)


class ContractFunctionFacade(PaidQueryFacade[ContractFunctionRequest, ContractCallResult]):
    """Read-only contract call, paid like any other query."""

    title = "Get Smart Contract Function"
    query_kind = "ContractCallQuery"

    def query_params(
        self, request: ContractFunctionRequest, client: LedgerClient
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "contract_id": request.contract_id,
            "gas": request.gas,
            "function_name": request.function_name,
            "function_parameters": tuple(request.function_parameters),
        }
        if request.sender_account_id:
            params["sender_account_id"] = resolve_account_id(request.sender_account_id)
        return params

    def describe(self, request: ContractFunctionRequest) -> list[DialogNode]:
        nodes = [
            text("Contract ID:"),
            copyable(request.contract_id),
            text(f"Function: {request.function_name}"),
            text(f"Gas: {request.gas}"),
        ]
        for parameter in request.function_parameters:
            nodes.append(text(f"Parameter: {parameter.type} {parameter.value}"))
        return nodes

    def normalize(
        self, request: ContractFunctionRequest, raw: Any, client: LedgerClient
    ) -> ContractCallResult:
        return normalize_contract_call(
            raw, contract_id=request.contract_id, function_name=request.function_name
        )
