import pytest

from sensorboard.uart_esp import EspUart, UartBusyError, UartConfig, Parity


class RecordingPort:
    def __init__(self):
        self.written = []

    def write(self, text):
        self.written.append(text)


class EchoingPort:
    """Answers with a canned reply once a command line has been terminated."""

    def __init__(self, reply):
        self.reply = reply
        self.uart = None
        self.written = []

    def write(self, text):
        self.written.append(text)
        if text == "\r\n" and self.uart is not None:
            self.uart.feed(self.reply)


@pytest.fixture
def port():
    return RecordingPort()


@pytest.fixture
def uart(port):
    return EspUart(port)


def test_send_command_writes_command_then_line_end(uart, port):
    uart.send_command("AT", "OK")
    assert port.written == ["AT", "\r\n"]
    assert uart.correct_response_arrived() is False


def test_second_command_while_busy_raises(uart, port):
    uart.send_command("AT", "OK")
    with pytest.raises(UartBusyError):
        uart.send_command("AT+RST", "OK")
    assert port.written == ["AT", "\r\n"]


def test_free_command_buffer_unblocks(uart, port):
    uart.send_command("AT", "OK")
    uart.free_command_buffer()
    uart.send_command("AT+RST", "ready")
    assert port.written[-2:] == ["AT+RST", "\r\n"]
    assert uart.correct_response_arrived() is False
    uart.feed("ready\r\n")
    assert uart.correct_response_arrived() is True


def test_expected_response_detected(uart):
    uart.send_command("AT", "OK")
    assert uart.correct_response_arrived() is False
    uart.feed("OK\r\n")
    assert uart.correct_response_arrived() is True


def test_wrong_response_not_accepted(uart):
    uart.send_command("AT", "OK")
    uart.feed("ERROR\r\n")
    assert uart.correct_response_arrived() is False


def test_response_matched_by_prefix(uart):
    uart.send_command("AT+CWJAP", "WIFI CONNECTED")
    uart.feed("WIFI CONNECTED AND READY\r\n")
    assert uart.correct_response_arrived() is True


def test_line_needs_carriage_return_before_newline(uart):
    uart.send_command("AT", "OK")
    uart.feed("OK\n")
    assert uart.correct_response_arrived() is False
    uart.feed("\r\n")
    assert uart.correct_response_arrived() is True


def test_response_split_across_chunks(uart):
    uart.send_command("AT", "OK")
    uart.feed("O")
    uart.feed("K\r")
    assert uart.correct_response_arrived() is False
    uart.feed("\n")
    assert uart.correct_response_arrived() is True


def test_bytes_are_accepted(uart):
    uart.send_command("AT", "OK")
    uart.feed(b"OK\r\n")
    assert uart.correct_response_arrived() is True


def test_new_command_resets_flag(uart):
    uart.send_command("AT", "OK")
    uart.feed("OK\r\n")
    uart.free_command_buffer()
    uart.send_command("AT", "OK")
    assert uart.correct_response_arrived() is False


def test_lines_are_separated(uart):
    uart.send_command("AT", "OK")
    uart.feed("busy\r\nnot OK\r\n")
    assert uart.correct_response_arrived() is False
    uart.feed("OK\r\n")
    assert uart.correct_response_arrived() is True


def test_prompt_after_single_character_ends_line(uart):
    uart.send_command("AT+MQTTPUBRAW", "x")
    uart.feed("x>")
    assert uart.correct_response_arrived() is True


def test_mqtt_message_passed_to_receiver(uart):
    received = []
    uart.set_mqtt_receiver(received.append)
    uart.send_command("AT", "OK")
    message = '+MQTTSUBRECV:0,"topic",4,data'
    uart.feed(message + "\r\n")
    assert received == [message]
    assert uart.correct_response_arrived() is False


def test_receiver_not_called_for_other_lines(uart):
    received = []
    uart.set_mqtt_receiver(received.append)
    uart.send_command("AT", "OK")
    uart.feed("OK\r\nready\r\n")
    assert received == []


def test_empty_lines_ignored(uart):
    received = []
    uart.set_mqtt_receiver(received.append)
    uart.send_command("AT", "OK")
    uart.feed("\r\n\r\n")
    assert uart.correct_response_arrived() is False
    assert received == []


def test_reply_arriving_during_send():
    port = EchoingPort("OK\r\n")
    uart = EspUart(port)
    port.uart = uart
    uart.send_command("AT", "OK")
    assert uart.correct_response_arrived() is True
    assert port.written == ["AT", "\r\n"]


def test_custom_config_is_kept(port):
    config = UartConfig(uart_id=0, baudrate=9600, parity=Parity.EVEN)
    uart = EspUart(port, config)
    assert uart.config.baudrate == 9600
    assert uart.config.parity is Parity.EVEN
    assert EspUart(port).config == UartConfig()