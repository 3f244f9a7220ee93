"""Driver logic for an SHT3x humidity sensor and a UART link to an ESP module."""

__version__ = "0.1.0"
__all__ = ["sht3x", "uart_esp"]