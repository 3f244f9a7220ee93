# sensorboard

Host-side driver logic for two parts of a sensor board:

- **`sensorboard.sht3x`** talks to a Sensirion SHT3x temperature and humidity
  sensor over an I²C bus that you supply. It builds the 16-bit commands, checks
  the CRC-8 of every response word and converts raw readings to °C and %RH.
- **`sensorboard.uart_esp`** runs the line protocol used to drive an ESP Wi-Fi
  module over a serial link: sending commands, spotting the expected reply, and
  handing `+MQTTSUBRECV` lines to an MQTT receiver callback.

The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## SHT3x sensor

Give `Sht3x` an object that follows the `I2CBus` protocol: `write(address, data)`
and `read(address, size)`. Either of them raises `I2CError` when the bus fails.
The address defaults to `0x44`.

```python
from sensorboard.sht3x import Sht3x, Sht3xError

sensor = Sht3x(bus)
sensor.probe()  # raises InitError if nothing answers

temperature, humidity = sensor.get_temperature_and_humidity()
print(f"{temperature:.2f} °C, {humidity:.2f} %RH")

print(sensor.read_serial_number())
status = sensor.read_status_register()
print(hex(status.config), status.heater_on, status.alert_pending)

sensor.enable_heater()
sensor.disable_heater()
sensor.soft_reset()
```

Other readings: `get_temperature()`, `get_humidity()` and
`read_measurement_buffer()` (the last returns `(temperature, humidity)` from
the sensor's periodic-mode buffer).

`StatusRegister` exposes the raw `config` word and the flags `crc_status`,
`command_status`, `reset_detected`, `temperature_alert`, `humidity_alert`,
`heater_on` and `alert_pending`.

Problems are raised as subclasses of `Sht3xError`, each with a numeric `code`:
`SendCommandError`, `ReceiveDataError`, `ChecksumError` and `InitError`.

The helpers `crc8`, `verify_checksums`, `raw_to_temperature` and
`raw_to_humidity` can be used on their own. All sensor commands are listed in
the `Command` enum; `Command.to_bytes()` gives the two bytes sent on the bus.

## ESP UART link

`EspUart` writes through an object that follows the `SerialPort` protocol
(`write(text)`). Characters received from the module are passed to `feed`,
as `str` or `bytes`. Lines end with `\r\n`.

```python
from sensorboard.uart_esp import EspUart, UartConfig, Parity

link = EspUart(port, UartConfig(baudrate=115200, parity=Parity.NONE))
link.set_mqtt_receiver(lambda line: print("mqtt:", line))

link.send_command("AT", "OK")
link.feed("AT\r\nOK\r\n")
assert link.correct_response_arrived()
link.free_command_buffer()
```

A response counts as correct when a received line starts with the expected
text. Only one command may be outstanding at a time: calling `send_command`
again before `free_command_buffer` raises `UartBusyError`.

## What the package does not do

It contains no bus or serial-port implementation: `I2CBus` and `SerialPort`
are protocols that you implement on top of your own hardware access.
`UartConfig` only records line settings; nothing applies them to a port. There
is no Wi-Fi or MQTT connection handling beyond passing `+MQTTSUBRECV` lines to
your callback, and there is no command-line program.