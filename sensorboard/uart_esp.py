"""Line-oriented command channel to an ESP32 Wi-Fi module over a UART."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

UART_BUFFER_SIZE = 1024
MQTT_RECEIVE_PREFIX = "+MQTTSUBRECV"
LINE_TERMINATOR = "\r\n"


class Parity(IntEnum):
    """Parity setting of the serial line."""

    NONE = 0
    ODD = 1
    EVEN = 2


@dataclass
class UartConfig:
    """Serial line settings; the defaults match the ESP32 firmware and board wiring."""

    name: str = "uart_to_esp32"
    uart_id: int = 1
    tx_pin: int = 4
    rx_pin: int = 5
    baudrate: int = 115200
    data_bits: int = 8
    stop_bits: int = 1
    parity: Parity = Parity.NONE


class SerialPort(Protocol):
    """The transmit side of a serial line."""

    def write(self, text: str) -> None:
        """Send ``text`` over the line."""


class UartBusyError(Exception):
    """Raised when a command is sent while another one is still in flight."""


class EspUart:
    """Sends commands to the ESP module and scans its replies line by line.

    Received characters are handed to :meth:`feed`, which plays the role of the
    receive interrupt handler.
    """

    def __init__(self, port: SerialPort, config: Optional[UartConfig] = None) -> None:
        self.port = port
        self.config = config if config is not None else UartConfig()
        self._buffer: list[str] = []
        self._last_was_return = False
        self._correct_response = False
        self._command = ""
        self._expected_response = ""
        self._mqtt_receiver: Optional[Callable[[str], None]] = None

    def set_mqtt_receiver(self, receiver: Optional[Callable[[str], None]]) -> None:
        """Install the callback that gets every incoming MQTT message line."""
        self._mqtt_receiver = receiver

    def send_command(self, command: str, expected_response: str) -> None:
        """Send ``command`` and start waiting for a line that begins with ``expected_response``.

        Call :meth:`free_command_buffer` once the transaction is finished.
        """
        if self._command:
            logger.info("UART is busy. Can't send command %s.", command)
            raise UartBusyError(f"UART is busy, cannot send command {command!r}")
        self._command = command
        self._correct_response = False
        self._expected_response = expected_response
        logger.debug("COMMAND: %s", command)
        self.port.write(command)
        self.port.write(LINE_TERMINATOR)

    def correct_response_arrived(self) -> bool:
        """Whether the expected response has been received since the last command."""
        return self._correct_response

    def free_command_buffer(self) -> None:
        """Release the channel so that the next command can be sent."""
        self._command = ""

    def feed(self, data: str | bytes) -> None:
        """Process characters received from the module."""
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("latin-1")
        for char in data:
            self._receive_char(char)

    def _receive_char(self, char: str) -> None:
        if char in ("\n", "\r", "\0"):
            if self._last_was_return and char == "\n":
                self._handle_line()
                self._buffer.clear()
            elif char == "\r":
                self._last_was_return = True
        elif char == ">" and len(self._buffer) == 1:
            self._handle_line()
            self._buffer.clear()
        else:
            if len(self._buffer) < UART_BUFFER_SIZE - 1:
                self._buffer.append(char)
            self._last_was_return = False

    def _handle_line(self) -> None:
        line = "".join(self._buffer)
        if not line:
            return
        if line.startswith(MQTT_RECEIVE_PREFIX) and self._mqtt_receiver is not None:
            self._mqtt_receiver(line)
        if line.startswith(self._expected_response):
            logger.debug("Expected message received: %s", line)
            self._correct_response = True
        else:
            logger.debug("Received message was: %s", line)