"""Kafka sink for streaming contract events to Kafka topics."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from confluent_kafka import KafkaException, Producer
from confluent_kafka.serialization import MessageField, SerializationContext

from frac_estate.exceptions import SinkError
from frac_estate.models import ContractEvent, Event
from frac_estate.sinks.serialization import to_dict, to_envelope

logger = logging.getLogger(__name__)

SCHEMA_NAMESPACE = "com.fracestate.tron"

# Every contract event travels in the same envelope; ``data`` is JSON text
ENVELOPE_SCHEMA = {
    "type": "record",
    "name": "ContractEventEnvelope",
    "namespace": SCHEMA_NAMESPACE,
    "fields": [
        {"name": "event_id", "type": "string"},
        {"name": "event_type", "type": "string"},
        {"name": "event_time", "type": {"type": "long", "logicalType": "timestamp-millis"}},
        {"name": "source", "type": "string"},
        {"name": "subject", "type": "string"},
        {"name": "data", "type": "string"},
        {"name": "block_number", "type": "long"},
    ],
}


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    schema_registry_url: str | None = None
    acks: str = "all"  # "0", "1", "all"
    batch_size: int = 16384  # bytes
    linger_ms: int = 5  # ms to wait for batching
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


def topic_for(prefix: str, event_type: str) -> str:
    """``FractionsPurchased`` -> ``<prefix>.fractions-purchased``."""
    kebab = "".join(f"-{c.lower()}" if c.isupper() else c for c in event_type).lstrip("-")
    return f"{prefix}.{kebab}"


class KafkaSink:
    """Publish contract events, one topic per event type.

    Messages are keyed by contract address so each property's events
    stay ordered within a partition.
    """

    def __init__(self, config: ProducerConfig | str, topic_prefix: str = "dev.fractional") -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | str
            Producer configuration or bootstrap servers string.
        topic_prefix : str
            Prefix for every topic name.
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)

        self.config = config
        self.topic_prefix = topic_prefix
        self.producer = self._create_producer()
        self.stats = ProducerStats()
        self._avro_serializer: Any = None

        if config.schema_registry_url:
            self._init_avro_serializer()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(
            {
                "bootstrap.servers": self.config.bootstrap_servers,
                "acks": self.config.acks,
                "retries": self.config.retries,
                "linger.ms": self.config.linger_ms,
                "batch.size": self.config.batch_size,
                "compression.type": self.config.compression,
            }
        )

    def _init_avro_serializer(self) -> None:
        """Register the envelope schema (requires ``confluent-kafka[avro]``)."""
        from confluent_kafka.schema_registry import SchemaRegistryClient
        from confluent_kafka.schema_registry.avro import AvroSerializer

        schema_registry_client = SchemaRegistryClient({"url": self.config.schema_registry_url})
        self._avro_serializer = AvroSerializer(
            schema_registry_client,
            json.dumps(ENVELOPE_SCHEMA),
            to_dict=self._to_avro_dict,
        )
        logger.info("Avro serializer initialized for %s", ENVELOPE_SCHEMA["name"])

    @staticmethod
    def _to_avro_dict(envelope: Event, ctx: SerializationContext) -> dict:
        """Convert envelope to Avro-compatible dict."""
        event_time = envelope.event_time
        return {
            "event_id": envelope.event_id,
            "event_type": envelope.event_type,
            "event_time": int(event_time.timestamp() * 1000) if isinstance(event_time, datetime) else 0,
            "source": envelope.source,
            "subject": envelope.subject,
            "data": json.dumps(envelope.data, default=str),
            "block_number": envelope.metadata.get("block_number", 0),
        }

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def send(self, event: ContractEvent) -> None:
        """Send a single contract event."""
        envelope = to_envelope(event)
        topic = topic_for(self.topic_prefix, event.event_type.value)

        if self._avro_serializer is not None:
            value = self._avro_serializer(envelope, SerializationContext(topic, MessageField.VALUE))
        else:
            value = json.dumps(to_dict(envelope), ensure_ascii=False, default=str).encode("utf-8")

        try:
            self.producer.produce(
                topic=topic,
                key=event.contract_address.encode("utf-8"),
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as exc:
            raise SinkError(f"Cannot produce to {topic}: {exc}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[ContractEvent]) -> None:
        """Publish a batch of contract events and wait for delivery."""
        logger.info("Writing %s batch: %d events", entity_type, len(records))

        for record in records:
            self.send(record)

        self.flush()
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
