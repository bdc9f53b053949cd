"""Consensus service (HCS) operation schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from hedera_wallet.schemas.operation import OperationRequest
from hedera_wallet.schemas.transfer import ServiceFee


class CreateTopicRequest(OperationRequest):
    """Create a consensus topic. The current key becomes admin when requested."""

    kind: Literal["create_topic"] = "create_topic"
    topic_memo: str = ""
    admin_key: bool = False
    submit_key: bool = False
    auto_renew_period: Optional[int] = Field(None, gt=0)


class UpdateTopicRequest(OperationRequest):
    """Update a consensus topic. Signed with the current key as admin."""

    kind: Literal["update_topic"] = "update_topic"
    topic_id: str = Field(..., min_length=1)
    topic_memo: Optional[str] = None
    admin_public_key: Optional[str] = None
    submit_public_key: Optional[str] = None
    auto_renew_account_id: Optional[str] = None
    auto_renew_period: Optional[int] = Field(None, gt=0)
    expiration_time: Optional[datetime] = None


class DeleteTopicRequest(OperationRequest):
    """Delete a consensus topic."""

    kind: Literal["delete_topic"] = "delete_topic"
    topic_id: str = Field(..., min_length=1)


class SubmitMessageRequest(OperationRequest):
    """Submit a message to a topic, chunked by the ledger client if large."""

    kind: Literal["submit_message"] = "submit_message"
    topic_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    max_chunks: Optional[int] = Field(None, gt=0)
    chunk_size: Optional[int] = Field(None, gt=0)


class TopicInfoRequest(OperationRequest):
    """Paid ledger query for topic information."""

    kind: Literal["get_topic_info"] = "get_topic_info"
    topic_id: str = Field(..., min_length=1)
    service_fee: ServiceFee = Field(default_factory=ServiceFee)
