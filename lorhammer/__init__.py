"""Building blocks for LoRaWAN load tests: scenarios, deployers, provisioners and reports."""

__version__ = "0.1.0"