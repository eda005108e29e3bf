# gt7shaker

Receive and decode the telemetry stream that Gran Turismo 7 sends over UDP,
for use by bass shakers or other sim-racing gear. The package also holds a
small Salsa20 stream cipher and a `salsa20` command that encrypts or decrypts
files with it.

It needs nothing beyond the standard library:

    pip install .

## Reading telemetry

GT7 only sends telemetry to a machine that keeps sending it heartbeats.
`gt7shaker.gt7.GT7Client` binds local UDP port 33740 (`LOCAL_PORT`) and sends
its one-byte heartbeat `b"A"` to port 33739 (`REMOTE_PORT`) of the console.
Both ports can be passed to the constructor.

```python
from gt7shaker.gt7 import GT7Client

with GT7Client("192.168.1.50") as client:
    client.send_heartbeat()
    packet = client.read_data()
    print(packet.current_gear(), packet.suggested_gear())
    print(packet.tyre_speed(0), packet.tyre_slip_ratio(0))
```

The client can also be used with `open()` and `close()`; calling
`send_heartbeat()` or `read_data()` on a client that is not open raises
`RuntimeError`.

The socket is non-blocking. `read_data()` returns the newest packet when a
datagram of at least `PACKET_SIZE` (0x128) bytes has arrived, and otherwise
the packet it returned last time (an all-zero packet before the first one).
Keep sending heartbeats every so often or the console stops sending.

## Packets

`GT7Packet` is a frozen dataclass with one field per value of the telemetry
layout: position, velocities, rotation, engine RPM, fuel, speed, boost, oil and
water data, tyre temperatures, lap counts and times, alert RPMs, `flags` (a
`SimulatorFlags` value), the `gears` byte, throttle, brake, road plane, wheel
speeds, tyre radii, suspension heights, clutch data, gear ratios and car code.
It also offers:

- `current_gear()` and `suggested_gear()`: the lower and upper four bits of
  `gears`;
- `powertrain_type()`: 0 when the fuel capacity is above 10 (combustion car),
  1 when it is 0 (electric car), 2 when it is 5 (kart), 255 otherwise;
- `tyre_speed(index)`: speed of tyre 0 to 3 (front left, front right, rear
  left, rear right) in km/h, 0.0 for any other index;
- `tyre_slip_ratio(index)`: tyre speed divided by car speed, 0.0 when the car
  stands still;
- `flag(index)`: `True` or `False`; index 0 asks whether no flag is set,
  indexes 1 to 13 test flag bits 0 to 12, any other index gives `False`.

Datagrams captured some other way can be handled without a socket:
`decrypt_packet(data)` removes the Salsa20 layer from the first `PACKET_SIZE`
bytes, and `parse_packet(data)` turns decrypted bytes into a `GT7Packet`. Both
raise `ValueError` for data shorter than `PACKET_SIZE`.

## Salsa20

```python
from gt7shaker.salsa20 import Salsa20

cipher = Salsa20(bytes(32))  # 256-bit key
cipher.set_iv(bytes(8))      # 64-bit IV, resets the block counter
ciphertext = cipher.process_bytes(b"some plaintext")
```

Encrypting and decrypting are the same operation. `process_blocks(data)`
takes whole 64-byte blocks and raises `ValueError` otherwise;
`process_bytes(data)` takes any length, but a trailing partial block uses up a
whole block of key stream, so it is normally the last call on a stream.
`generate_key_stream()` returns the next 64 bytes of key stream. A key or IV
of the wrong length raises `ValueError`; `None` leaves the state as it is.

## The `salsa20` command

    salsa20 -p INPUT OUTPUT KEY
    salsa20 -h

`-p` encrypts or decrypts INPUT with KEY and writes the result to OUTPUT,
showing progress as a percentage. KEY is the 32-byte key followed by the
8-byte IV, written as 80 hexadecimal digits. Input and output must be
different files. `-h` prints the help text. The command exits with 0 on
success, 1 when its arguments are invalid, and 2 when the input file cannot be
opened or the output file cannot be created.

The same work is available from Python: `gt7shaker.cli.parse_key(text)`
decodes the 80 hex digits (raising `ValueError` for bad input), and
`gt7shaker.cli.process_file(input_path, output_path, key, progress)` processes
a file, calls `progress` with a percentage after each chunk and returns the
number of bytes processed.

## What it does not do

The package decodes telemetry only. It has no code that turns telemetry into
sound or drives shaker hardware, and no loop that sends heartbeats or reads
packets on its own; the caller does both.

## Tests

    pip install .[test]
    pytest