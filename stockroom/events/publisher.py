"""
Dapr Change Publisher
Forwards change-feed signals to other processes through Dapr pub/sub
"""

from dapr.clients import DaprClient
import json
import logging
from typing import Dict, Any, Optional
from datetime import datetime
import uuid

logger = logging.getLogger(__name__)


class ChangePublisher:
    """
    Synchronous Dapr publisher for change notifications.
    Each change is wrapped in a CloudEvents envelope on topic
    ``stockroom.<table>.changed``.
    """

    def __init__(self, pubsub_name: str = "stockroom-pubsub", service_name: str = "stockroom"):
        self.pubsub_name = pubsub_name
        self.service_name = service_name

    def topic_for(self, table: str) -> str:
        return f"stockroom.{table}.changed"

    def _build_event_payload(self, event_type: str, data: Dict[str, Any],
                             correlation_id: Optional[str] = None) -> Dict[str, Any]:
        """Build CloudEvents-compliant event payload"""
        return {
            "specversion": "1.0",
            "type": event_type,
            "source": self.service_name,
            "id": str(uuid.uuid4()),
            "time": datetime.utcnow().isoformat() + "Z",
            "datacontenttype": "application/json",
            "data": data,
            "correlationid": correlation_id or str(uuid.uuid4())
        }

    def publish_change(self, change, correlation_id: Optional[str] = None) -> bool:
        """
        Publish one change signal

        Returns:
            bool: True if published, False if the sidecar rejected it
        """
        topic = self.topic_for(change.table)
        try:
            payload = self._build_event_payload(topic, change.to_dict(), correlation_id)
            with DaprClient() as client:
                client.publish_event(
                    pubsub_name=self.pubsub_name,
                    topic_name=topic,
                    data=json.dumps(payload),
                    data_content_type="application/json"
                )
            logger.info(f"Published change: {topic}", extra={"eventType": topic})
            return True
        except Exception as e:
            # Local subscribers already ran; remote devices refresh on their next load
            logger.error(f"Failed to publish change: {topic} - {str(e)}", extra={"eventType": topic})
            return False
