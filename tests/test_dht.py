import pytest

from chipdrivers.dht import DHT, DHTStage


class FakeLine:
    """Simulated timer and data line that fires edge interrupts at set pulse widths."""

    def __init__(self, pulses):
        self.pulses = list(pulses)
        self.t = 0
        self.listening = False
        self.in_irq = False
        self.dht = None
        self.events = []

    def pin_output(self):
        self.events.append("output")

    def pin_input(self):
        self.events.append("input")
        self.listening = True

    def pin_low(self):
        self.events.append("low")

    def pin_high(self):
        self.events.append("high")

    def pin_read(self):
        return 1

    def reset_timer(self):
        self.t = 0

    def read_timer(self):
        self.t += 1
        if self.listening and not self.in_irq and self.pulses and self.t >= self.pulses[0]:
            self.pulses.pop(0)
            self.in_irq = True
            try:
                self.dht.interrupt_handler_io()
            finally:
                self.in_irq = False
        return self.t


def frame_pulses(frame, response=150):
    pulses = [response]
    for byte in frame:
        for shift in range(7, -1, -1):
            pulses.append(120 if (byte >> shift) & 1 else 70)
    return pulses


def make(pulses):
    line = FakeLine(pulses)
    dht = DHT(
        line.pin_output,
        line.pin_input,
        line.pin_low,
        line.pin_high,
        line.pin_read,
        line.reset_timer,
        line.read_timer,
    )
    line.dht = dht
    return line, dht


def with_checksum(first4):
    return bytes(first4) + bytes([sum(first4) & 0xFF])


def test_no_value_before_reading():
    _, dht = make([])
    assert dht.stage is DHTStage.IDLE
    assert dht.get_value() is None


def test_full_reading_decodes_values():
    frame = with_checksum([0x02, 0x8C, 0x01, 0x5F])
    line, dht = make(frame_pulses(frame))
    dht.start_reading()
    assert dht.stage is DHTStage.FINISHED
    assert bytes(dht.data) == frame
    assert dht.get_value() == ((0x02 << 8) | 0x8C, (0x01 << 8) | 0x5F)
    assert line.events[:3] == ["output", "high", "low"]
    assert "input" in line.events


def test_negative_temperature():
    frame = with_checksum([0x01, 0x00, 0x80, 0x65])
    _, dht = make(frame_pulses(frame))
    dht.start_reading()
    humidity, temperature = dht.get_value()
    assert humidity == 0x0100
    assert temperature == -0x65


def test_bad_parity_raises():
    frame = bytes([0x02, 0x8C, 0x01, 0x5F, 0x00])
    _, dht = make(frame_pulses(frame))
    dht.start_reading()
    assert dht.stage is DHTStage.FINISHED
    with pytest.raises(ValueError):
        dht.get_value()
    assert dht.stage is DHTStage.INVALID_PARITY


def test_no_response_times_out():
    _, dht = make([])
    dht.start_reading()
    assert dht.stage is DHTStage.ERROR
    assert dht.get_value() is None


def test_short_response_pulse_is_error():
    _, dht = make([100])
    dht.start_reading()
    assert dht.stage is DHTStage.ERROR


def test_invalid_data_pulse_is_error():
    _, dht = make([150, 70, 250])
    dht.start_reading()
    assert dht.stage is DHTStage.ERROR


def test_restart_clears_previous_data():
    frame = with_checksum([0x11, 0x22, 0x33, 0x44])
    line, dht = make(frame_pulses(frame))
    dht.start_reading()
    assert dht.stage is DHTStage.FINISHED
    line.pulses = []
    line.listening = False
    dht.start_reading()
    assert dht.stage is DHTStage.ERROR
    assert bytes(dht.data) == bytes(5)