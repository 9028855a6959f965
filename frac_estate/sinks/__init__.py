"""Output sinks for exporting contract events and receipts."""

from frac_estate.sinks.console import ConsoleSink
from frac_estate.sinks.json_file import JsonFileSink
from frac_estate.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
