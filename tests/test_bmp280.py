import struct

import pytest

from chipdrivers.bmp280 import (
    BME280_CHIP_ID,
    BME680_CHIP_ID,
    CHIP_ID1,
    CHIP_ID2,
    CHIP_ID3,
    FILTER_COEFF_4,
    FILTER_COEFF_OFF,
    I2C_ADDRESS_HIGH,
    I2C_ADDRESS_LOW,
    MODE_FORCED,
    MODE_NORMAL,
    OVERSAMPLING_16X,
    OVERSAMPLING_2X,
    OVERSAMPLING_8X,
    REG_CONFIG,
    REG_CTRL_MEAS,
    REG_ID,
    REG_PRESS_MSB,
    REG_RESET,
    REG_STATUS,
    REG_TEMP_MSB,
    SOFT_RESET,
    STANDBYTIME_0M5,
    STANDBYTIME_1000M,
    WORK_MODE_OVERSAMPLING,
    BMP280,
    BMP280Config,
    BMP280ControlMeas,
    BMP280Status,
    DeviceNotFoundError,
)

CALIBRATION = dict(
    T1=27504, T2=26435, T3=-1000,
    P1=36477, P2=-10685, P3=3024, P4=2855, P5=140, P6=-7,
    P7=15500, P8=-14600, P9=6000,
)


class FakeBus:
    def __init__(self, chip_id=CHIP_ID3, short=False):
        self.regs = {REG_ID: chip_id}
        self.short = short
        self.addresses = []
        cal = CALIBRATION
        blob = struct.pack(
            "<Hhh Hhh hhh hhh",
            cal["T1"], cal["T2"], cal["T3"],
            cal["P1"], cal["P2"], cal["P3"],
            cal["P4"], cal["P5"], cal["P6"],
            cal["P7"], cal["P8"], cal["P9"],
        )
        for offset, byte in enumerate(blob):
            self.regs[0x88 + offset] = byte

    def set_raw(self, reg, raw):
        self.regs[reg] = (raw >> 12) & 0xFF
        self.regs[reg + 1] = (raw >> 4) & 0xFF
        self.regs[reg + 2] = (raw & 0x0F) << 4

    def read(self, addr, reg, count):
        self.addresses.append(addr)
        if self.short:
            return b""
        return bytes(self.regs.get(reg + i, 0) for i in range(count))

    def write(self, addr, reg, data):
        self.addresses.append(addr)
        for i, byte in enumerate(data):
            self.regs[reg + i] = byte


def make(bus, cspin=0):
    return BMP280(cspin, bus.write, bus.read, lambda ms: None)


def test_address_selection():
    assert make(FakeBus(), 0).addr == I2C_ADDRESS_LOW
    assert make(FakeBus(), 1).addr == I2C_ADDRESS_HIGH


def test_setup_writes_default_configuration():
    bus = FakeBus()
    sensor = make(bus)
    sensor.setup()
    assert bus.regs[REG_CTRL_MEAS] == 0b10110111
    config = BMP280Config.from_value(bus.regs[REG_CONFIG])
    assert (config.t_sb, config.filter) == (STANDBYTIME_0M5, FILTER_COEFF_OFF)
    assert set(bus.addresses) == {I2C_ADDRESS_LOW}


def test_setup_loads_calibration():
    sensor = make(FakeBus())
    sensor.setup()
    for name, value in CALIBRATION.items():
        assert getattr(sensor, "dig_" + name) == value


def test_setup_unknown_chip_raises():
    with pytest.raises(DeviceNotFoundError):
        make(FakeBus(chip_id=0x12)).setup()


@pytest.mark.parametrize("chip_id", [CHIP_ID1, CHIP_ID2, CHIP_ID3, BME280_CHIP_ID, BME680_CHIP_ID])
def test_verify_id_accepts_known_ids(chip_id):
    sensor = make(FakeBus(chip_id=chip_id))
    assert sensor.verify_id() is True
    assert sensor.sensor_id == chip_id


def test_verify_id_rejects_unknown():
    assert make(FakeBus(chip_id=0x00)).verify_id() is False


def test_short_read_raises():
    with pytest.raises(OSError):
        make(FakeBus(short=True)).verify_id()


def test_raw_values_round_trip():
    bus = FakeBus()
    bus.set_raw(REG_TEMP_MSB, 519888)
    bus.set_raw(REG_PRESS_MSB, 415148)
    sensor = make(bus)
    assert sensor.read_raw_temperature() == 519888
    assert sensor.read_raw_pressure() == 415148
    assert sensor.raw_temperature == 519888


def test_temperature_and_pressure_worked_example():
    bus = FakeBus()
    bus.set_raw(REG_TEMP_MSB, 519888)
    bus.set_raw(REG_PRESS_MSB, 415148)
    sensor = make(bus)
    sensor.setup()
    sensor.read_raw_temperature()
    assert sensor.calc_temperature() == 2508
    sensor.read_raw_pressure()
    assert sensor.calc_pressure() == 100656


def test_temperature_rises_with_raw_value():
    sensor = make(FakeBus())
    sensor.setup()
    sensor.raw_temperature = 500000
    low = sensor.calc_temperature()
    sensor.raw_temperature = 540000
    assert sensor.calc_temperature() > low


def test_pressure_falls_with_raw_value():
    sensor = make(FakeBus())
    sensor.setup()
    sensor.raw_temperature = 519888
    sensor.calc_temperature()
    sensor.raw_pressure = 400000
    high = sensor.calc_pressure()
    sensor.raw_pressure = 430000
    assert sensor.calc_pressure() < high


def test_pressure_zero_when_p1_zero():
    sensor = make(FakeBus())
    sensor.setup()
    sensor.dig_P1 = 0
    sensor.raw_pressure = 415148
    assert sensor.calc_pressure() == 0


def test_altitude_zero_at_sea_level_pressure():
    bus = FakeBus()
    bus.set_raw(REG_TEMP_MSB, 519888)
    bus.set_raw(REG_PRESS_MSB, 415148)
    sensor = make(bus)
    sensor.setup()
    sensor.read_raw_temperature()
    sensor.calc_temperature()
    sensor.read_raw_pressure()
    pressure_hpa = sensor.calc_pressure() / 100.0
    assert sensor.get_altitude(pressure_hpa) == 0
    assert sensor.get_altitude(pressure_hpa + 20) > 0


def test_reset_writes_reset_code():
    bus = FakeBus()
    make(bus).reset()
    assert bus.regs[REG_RESET] == SOFT_RESET


def test_get_status():
    bus = FakeBus()
    bus.regs[REG_STATUS] = 0b1001
    assert make(bus).get_status() == BMP280Status(im_update=True, measuring=True)
    bus.regs[REG_STATUS] = 0
    assert make(bus).get_status() == BMP280Status()


def test_set_power_mode_keeps_oversampling():
    bus = FakeBus()
    bus.regs[REG_CTRL_MEAS] = BMP280ControlMeas(MODE_NORMAL, OVERSAMPLING_8X, OVERSAMPLING_2X).value
    make(bus).set_power_mode(MODE_FORCED)
    ctrl = BMP280ControlMeas.from_value(bus.regs[REG_CTRL_MEAS])
    assert ctrl == BMP280ControlMeas(MODE_FORCED, OVERSAMPLING_8X, OVERSAMPLING_2X)


def test_set_oversampling_individually():
    bus = FakeBus()
    bus.regs[REG_CTRL_MEAS] = BMP280ControlMeas(MODE_NORMAL, 0, 0).value
    sensor = make(bus)
    sensor.set_oversamp_temperature(OVERSAMPLING_2X)
    sensor.set_oversamp_pressure(OVERSAMPLING_16X)
    ctrl = BMP280ControlMeas.from_value(bus.regs[REG_CTRL_MEAS])
    assert ctrl == BMP280ControlMeas(MODE_NORMAL, OVERSAMPLING_16X, OVERSAMPLING_2X)


def test_filter_and_standby_preserve_each_other():
    bus = FakeBus()
    bus.regs[REG_CONFIG] = BMP280Config(spi3w_en=1).value
    sensor = make(bus)
    sensor.set_filter(FILTER_COEFF_4)
    sensor.set_standby_time(STANDBYTIME_1000M)
    config = BMP280Config.from_value(bus.regs[REG_CONFIG])
    assert config == BMP280Config(spi3w_en=1, filter=FILTER_COEFF_4, t_sb=STANDBYTIME_1000M)


@pytest.mark.parametrize("work_mode", sorted(WORK_MODE_OVERSAMPLING))
def test_set_work_mode(work_mode):
    bus = FakeBus()
    bus.regs[REG_CTRL_MEAS] = BMP280ControlMeas(MODE_NORMAL, 0, 0).value
    make(bus).set_work_mode(work_mode)
    ctrl = BMP280ControlMeas.from_value(bus.regs[REG_CTRL_MEAS])
    assert (ctrl.osrs_t, ctrl.osrs_p) == WORK_MODE_OVERSAMPLING[work_mode]
    assert ctrl.mode == MODE_NORMAL


def test_set_work_mode_unknown_leaves_register():
    bus = FakeBus()
    original = BMP280ControlMeas(MODE_NORMAL, OVERSAMPLING_8X, OVERSAMPLING_2X).value
    bus.regs[REG_CTRL_MEAS] = original
    make(bus).set_work_mode(0x42)
    assert bus.regs[REG_CTRL_MEAS] == original


@pytest.mark.parametrize("value", [0, 0x5A, 0xB7, 0xFF])
def test_ctrl_meas_round_trip(value):
    assert BMP280ControlMeas.from_value(value).value == value


@pytest.mark.parametrize("value", [0, 0x01, 0xB5, 0xFD])
def test_config_round_trip(value):
    assert BMP280Config.from_value(value).value == value


def test_config_ignores_unused_bit():
    assert BMP280Config.from_value(0b10).value == 0