"""Driver for the Sensirion SHT3x temperature and humidity sensor over I2C."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = 0x44
CRC8_POLYNOMIAL = 0x31
DENOMINATOR = (1 << 16) - 1.0


class Command(IntEnum):
    """16-bit commands understood by the sensor."""

    READ_SERIALNUMBER = 0x3780
    READ_STATUS = 0xF32D
    CLEAR_STATUS = 0x3041
    HEATER_ENABLE = 0x306D
    HEATER_DISABLE = 0x3066
    SOFT_RESET = 0x30A2
    MEASURE_CLOCKSTRETCH_HIGH = 0x2C06
    MEASURE_CLOCKSTRETCH_MEDIUM = 0x2C0D
    MEASURE_CLOCKSTRETCH_LOW = 0x2C10
    MEASURE_POLLING_HIGH = 0x2400
    MEASURE_POLLING_MEDIUM = 0x240B
    MEASURE_POLLING_LOW = 0x2416
    MEASURE_PERIODIC_05_HIGH = 0x2032
    MEASURE_PERIODIC_05_MEDIUM = 0x2024
    MEASURE_PERIODIC_05_LOW = 0x202F
    MEASURE_PERIODIC_1_HIGH = 0x2130
    MEASURE_PERIODIC_1_MEDIUM = 0x2126
    MEASURE_PERIODIC_1_LOW = 0x212D
    MEASURE_PERIODIC_2_HIGH = 0x2236
    MEASURE_PERIODIC_2_MEDIUM = 0x2220
    MEASURE_PERIODIC_2_LOW = 0x222B
    MEASURE_PERIODIC_4_HIGH = 0x2334
    MEASURE_PERIODIC_4_MEDIUM = 0x2322
    MEASURE_PERIODIC_4_LOW = 0x2329
    MEASURE_PERIODIC_10_HIGH = 0x2737
    MEASURE_PERIODIC_10_MEDIUM = 0x2721
    MEASURE_PERIODIC_10_LOW = 0x272A
    FETCH_DATA = 0xE000
    READ_ALERT_LIMITS_LOW = 0xE102
    READ_ALERT_LIMITS_LOW_CLEAR = 0xE109
    READ_ALERT_LIMITS_HIGH_SET = 0xE11F
    READ_ALERT_LIMITS_HIGH_CLEAR = 0xE114
    WRITE_ALERT_LIMITS_HIGH_SET = 0x611D
    WRITE_ALERT_LIMITS_HIGH_CLEAR = 0x6116
    WRITE_ALERT_LIMITS_LOW_CLEAR = 0x610B
    WRITE_ALERT_LIMITS_LOW_SET = 0x6100
    NO_SLEEP = 0x303E

    def to_bytes(self) -> bytes:
        return bytes((self.value >> 8, self.value & 0xFF))


class I2CError(Exception):
    """Raised by an I2C bus when a transfer fails."""


class I2CBus(Protocol):
    """The bus operations the driver needs."""

    def write(self, address: int, data: bytes) -> None:
        """Write ``data`` to the device at ``address``; raise I2CError on failure."""

    def read(self, address: int, size: int) -> bytes:
        """Read ``size`` bytes from the device at ``address``; raise I2CError on failure."""


class Sht3xError(Exception):
    """Base class of all sensor errors."""

    code = 0x20


class SendCommandError(Sht3xError):
    code = 0x01


class ReceiveDataError(Sht3xError):
    code = 0x02


class ChecksumError(Sht3xError):
    code = 0x03


class InitError(Sht3xError):
    code = 0x10


@dataclass(frozen=True)
class StatusRegister:
    """The 16-bit status register with its individual flags."""

    config: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "StatusRegister":
        return cls((data[0] << 8) | data[1])

    def _bit(self, position: int) -> bool:
        return bool((self.config >> position) & 1)

    @property
    def crc_status(self) -> bool:
        return self._bit(0)

    @property
    def command_status(self) -> bool:
        return self._bit(1)

    @property
    def reset_detected(self) -> bool:
        return self._bit(4)

    @property
    def temperature_alert(self) -> bool:
        return self._bit(10)

    @property
    def humidity_alert(self) -> bool:
        return self._bit(11)

    @property
    def heater_on(self) -> bool:
        return self._bit(13)

    @property
    def alert_pending(self) -> bool:
        return self._bit(15)


def crc8(data: bytes) -> int:
    """CRC-8 as defined by the datasheet (polynomial 0x31, init 0xFF)."""
    checksum = 0xFF
    for byte in data:
        checksum ^= byte
        for _ in range(8):
            if checksum & 0x80:
                checksum = ((checksum << 1) ^ CRC8_POLYNOMIAL) & 0xFF
            else:
                checksum = (checksum << 1) & 0xFF
    return checksum


def verify_checksums(data: bytes) -> None:
    """Check every (msb, lsb, crc) triplet in ``data``; raise ChecksumError on mismatch."""
    for start in range(0, len(data) - len(data) % 3, 3):
        calculated = crc8(data[start : start + 2])
        transmitted = data[start + 2]
        if transmitted != calculated:
            logger.debug("checksum failed, input: %i, calculated: %i", transmitted, calculated)
            raise ChecksumError(
                f"checksum mismatch: received 0x{transmitted:02X}, calculated 0x{calculated:02X}"
            )
    logger.debug("checksum passed")


def raw_to_temperature(raw: int) -> float:
    """Convert a raw 16-bit reading to degrees Celsius."""
    return 175.0 * (raw / DENOMINATOR) - 45.0


def raw_to_humidity(raw: int) -> float:
    """Convert a raw 16-bit reading to relative humidity in percent."""
    return 100.0 * (raw / DENOMINATOR)


def _word(data: bytes, start: int) -> int:
    return (data[start] << 8) | data[start + 1]


class Sht3x:
    """An SHT3x sensor attached to an I2C bus."""

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address

    def probe(self) -> None:
        """Check that the sensor answers on the bus; raise InitError if not."""
        time.sleep(0.002)
        try:
            self.bus.write(self.address, Command.READ_STATUS.to_bytes())
        except I2CError as exc:
            raise InitError("sensor not available on bus") from exc

    def _send(self, command: Command) -> None:
        logger.debug("requesting data from sensor")
        try:
            self.bus.write(self.address, command.to_bytes())
        except I2CError as exc:
            logger.debug("sending request failed: %s", exc)
            raise SendCommandError(f"sending command 0x{command.value:04X} failed") from exc

    def _receive(self, size: int) -> bytes:
        logger.debug("receiving data from sensor")
        try:
            data = bytes(self.bus.read(self.address, size))
        except I2CError as exc:
            logger.debug("receiving data failed: %s", exc)
            raise ReceiveDataError("receiving data failed") from exc
        if len(data) < size:
            raise ReceiveDataError(f"expected {size} bytes, received {len(data)}")
        return data

    def _query(self, command: Command, size: int) -> bytes:
        self._send(command)
        data = self._receive(size)
        verify_checksums(data)
        return data

    def read_serial_number(self) -> int:
        data = self._query(Command.READ_SERIALNUMBER, 6)
        return (data[0] << 24) | (data[1] << 16) | (data[3] << 8) | data[4]

    def read_status_register(self) -> StatusRegister:
        return StatusRegister.from_bytes(self._query(Command.READ_STATUS, 3))

    def get_temperature(self) -> float:
        data = self._query(Command.MEASURE_CLOCKSTRETCH_LOW, 3)
        return raw_to_temperature(_word(data, 0))

    def get_humidity(self) -> float:
        data = self._query(Command.MEASURE_CLOCKSTRETCH_LOW, 6)
        return raw_to_humidity(_word(data, 3))

    def get_temperature_and_humidity(self) -> tuple[float, float]:
        data = self._query(Command.MEASURE_CLOCKSTRETCH_LOW, 6)
        return raw_to_temperature(_word(data, 0)), raw_to_humidity(_word(data, 3))

    def read_measurement_buffer(self) -> tuple[float, float]:
        data = self._query(Command.FETCH_DATA, 6)
        return raw_to_temperature(_word(data, 0)), raw_to_humidity(_word(data, 3))

    def enable_heater(self) -> None:
        self._send(Command.HEATER_ENABLE)

    def disable_heater(self) -> None:
        self._send(Command.HEATER_DISABLE)

    def soft_reset(self) -> None:
        self._send(Command.SOFT_RESET)