# chipdrivers

Drivers for common embedded sensors and converters, in pure Python. A driver never opens a bus or touches a pin itself. You hand it small callables that do the I/O: an I2C register read and write, a GPIO setter, a delay or a timer. The same driver then works with a real bus adapter, a simulator or a test fake.

## Contents

| Module | Chip / purpose |
| --- | --- |
| `chipdrivers.crc16` | CRC-16 with the 0xC001 (reflected 0x8005) polynomial, zero seed |
| `chipdrivers.battery_liion` | Li-ion cell voltage to charge level (per mille) |
| `chipdrivers.cbuffer` | Fixed-size byte ring buffer with length-prefixed objects |
| `chipdrivers.debouncer` | Button debouncing with single-press and auto-repeat modes |
| `chipdrivers.ads1x1x` | ADS1013/4/5 and ADS1113/4/5 ADC configuration |
| `chipdrivers.cs1237` | CS1237 24-bit ADC over its bit-banged two-wire interface |
| `chipdrivers.dht` | DHT-family temperature and humidity sensors |
| `chipdrivers.aht10` | AHT10 temperature and humidity sensor |
| `chipdrivers.bmp280` | BMP280 / BME280 pressure and temperature sensor |

## Installation

```
pip install chipdrivers
```

There are no runtime dependencies. To run the tests:

```
pip install "chipdrivers[test]"
pytest
```

## Callback conventions

- **I2C register devices** (`ADS1X1X`, `AHT10`, `BMP280`) take `write_reg(i2c_address, register, data)` and `read_reg(i2c_address, register, count)`. `read_reg` returns the bytes read; a short read raises `OSError`.
- **Bit-banged devices** (`CS1237`, `DHT`) take one callable per pin operation, plus a microsecond delay (`CS1237`) or a microsecond timer with reset (`DHT`).
- Delay callables take a number of milliseconds or microseconds, as named.

## Examples

### Helpers

```python
from chipdrivers.crc16 import crc16, check_crc16
from chipdrivers.battery_liion import convert_battery_level

value = crc16(b"\x01\x02\x03")
assert check_crc16(b"\x01\x02\x03", value)

convert_battery_level(3900)   # 170, i.e. 17.0 %; above 4150 mV gives 1000
```

### Circular buffer

```python
from chipdrivers.cbuffer import CircularBuffer, CircularBufferError

buf = CircularBuffer(16)        # one slot is kept free, so 15 bytes fit
buf.put(b"hello")
buf.get(2)                      # b"he"
len(buf)                        # 3
buf.remove(3)                   # drops everything if fewer bytes are stored
buf.put_object(b"frame")        # stored with a one-byte length prefix
buf.get_object()                # b"frame", or None when nothing is stored
```

`put` and `get` raise `CircularBufferError` when the data does not fit or is not there. Objects are limited to 255 bytes.

### Button debouncing

```python
from chipdrivers.debouncer import DebounceButton, ButtonMode

button = DebounceButton(read_button, mode=ButtonMode.MULTIPRESS)

# call once every millisecond, for example from a timer
button.process()

presses = button.pull_pressed_count()   # returns the count and clears it
```

A press registers after 6 ticks down. In `MULTIPRESS` mode, holding the button adds presses at a rising rate from 700 ticks on.

### ADS1115 converter

```python
from chipdrivers.ads1x1x import ADS1X1X, Variant, AddrPin, PGA, Mux, ADS111xDataRate

adc = ADS1X1X(Variant.ADS1115, AddrPin.GND, write_reg, read_reg)
adc.set_pga(PGA.FS_4_096V)
adc.set_mux(Mux.AIN0_GND)
adc.set_data_rate(ADS111xDataRate.SPS_128)
adc.start_one_shot()          # writes the config register
adc.read_config()             # returns an ADS1X1XConfig
```

The driver writes and reads the config and threshold registers. Reading the conversion result (`REG_CONVERSION`) is left to your `read_reg` callable.

### CS1237 converter

```python
from chipdrivers.cs1237 import CS1237, SPEED_SEL_40HZ

adc = CS1237(pin_input, pin_output, clk_low, clk_high, dat_low, dat_high, read_dat, delay_us)
value = adc.poll()            # signed 24-bit value, or None if not ready
config = adc.read_config()
config.speed_sel = SPEED_SEL_40HZ
adc.write_config()
```

### DHT sensor

```python
from chipdrivers.dht import DHT

sensor = DHT(pin_output, pin_input, pin_low, pin_high, pin_read, reset_timer, read_timer)
# call sensor.interrupt_handler_io() on every falling edge of the data pin
sensor.start_reading()        # blocks until the transfer ends or fails
result = sensor.get_value()   # (humidity, temperature) in tenths, or None
```

`get_value` raises `ValueError` when the parity byte does not match.

### AHT10 sensor

```python
from chipdrivers.aht10 import AHT10

sensor = AHT10(0, write_reg, read_reg, delay_ms)
sensor.setup()                 # raises OSError if the init command fails
sensor.trigger_measurement()
measurement = sensor.read_measurement()   # None while busy or invalid
if measurement is not None:
    measurement.temperature()  # hundredths of °C
    measurement.humidity()     # per mille
```

### BMP280 barometer

```python
from chipdrivers.bmp280 import BMP280, DeviceNotFoundError

sensor = BMP280(0, write_reg, read_reg, delay_ms)
sensor.setup()                            # raises DeviceNotFoundError on an unknown chip ID
sensor.read_raw_temperature()
temperature = sensor.calc_temperature()   # hundredths of °C
sensor.read_raw_pressure()
pressure = sensor.calc_pressure()         # Pa
altitude = sensor.get_altitude(1013.25)   # metres
```

## What the package does not do

It has no drivers for EEPROMs, real-time clocks or energy-metering chips, and no helpers for those chips' checksums or value formats. It also ships no command-line tool: every module is a library used from your own code.