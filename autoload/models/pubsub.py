# autoload/models/pubsub.py
import base64
import binascii
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

BUCKET_ID_ATTR = "bucketId"
OBJECT_ID_ATTR = "objectId"
EVENT_TYPE_ATTR = "eventType"

OBJECT_FINALIZE = "OBJECT_FINALIZE"


class PubSubMessage(BaseModel):
    """
    Pub/Sub push message as delivered for GCS notifications:
    {
      "data": "base64-encoded object metadata (unused)",
      "id": "...",
      "attributes": {"bucketId": "...", "objectId": "...", "eventType": "..."}
    }
    """

    data: Optional[bytes] = None
    id: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value: Any) -> Optional[bytes]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("message.data must be a base64 string")
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"message.data is not valid base64: {e}") from e

    @field_validator("id", mode="before")
    @classmethod
    def _null_id(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("attributes", mode="before")
    @classmethod
    def _null_attributes(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            # null values read as the empty string, like a missing key
            return {k: "" if v is None else v for k, v in value.items()}
        return value

    def attribute(self, key: str) -> str:
        return self.attributes.get(key, "")

    @property
    def bucket_id(self) -> str:
        return self.attribute(BUCKET_ID_ATTR)

    @property
    def object_id(self) -> str:
        return self.attribute(OBJECT_ID_ATTR)

    @property
    def event_type(self) -> str:
        return self.attribute(EVENT_TYPE_ATTR)


class PubSubPushEnvelope(BaseModel):
    message: PubSubMessage = Field(default_factory=PubSubMessage)
    subscription: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("subscription", mode="before")
    @classmethod
    def _null_subscription(cls, value: Any) -> Any:
        return "" if value is None else value
