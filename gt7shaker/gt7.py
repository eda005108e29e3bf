"""Gran Turismo 7 telemetry: packet layout, decryption and a UDP client."""

from __future__ import annotations

import enum
import socket
import struct
from dataclasses import dataclass
from itertools import islice

from gt7shaker.salsa20 import KEY_SIZE, Salsa20

PACKET_SIZE = 0x128
LOCAL_PORT = 33740
REMOTE_PORT = 33739
HEARTBEAT = b"A"
KEY = b"Simulator Interface Packet GT7 ver 0.0"[:KEY_SIZE]

_IV_OFFSET = 0x40
_IV_XOR = 0xDEADBEAF
_RECV_SIZE = 65535

_LAYOUT = struct.Struct("<i3f3f3ff3fff4s7f4fi2h3i5hH4B3ff4f4f4f8I4f8fi")


class SimulatorFlags(enum.IntFlag):
    """Bit field describing the simulator and car state."""

    NONE = 0
    CAR_ON_TRACK = 1 << 0
    PAUSED = 1 << 1
    LOADING_OR_PROCESSING = 1 << 2
    IN_GEAR = 1 << 3
    HAS_TURBO = 1 << 4
    REV_LIMITER_BLINK_ALERT_ACTIVE = 1 << 5
    HAND_BRAKE_ACTIVE = 1 << 6
    LIGHTS_ACTIVE = 1 << 7
    HIGH_BEAM_ACTIVE = 1 << 8
    LOW_BEAM_ACTIVE = 1 << 9
    ASM_ACTIVE = 1 << 10
    TCS_ACTIVE = 1 << 11


@dataclass(frozen=True)
class GT7Packet:
    """One decrypted telemetry packet."""

    magic: int
    position: tuple[float, float, float]
    world_velocity: tuple[float, float, float]
    rotation: tuple[float, float, float]
    orientation_relative_to_north: float
    angular_velocity: tuple[float, float, float]
    body_height: float
    engine_rpm: float
    iv: bytes
    fuel_level: float
    fuel_capacity: float
    speed: float
    boost: float
    oil_pressure: float
    water_temp: float
    oil_temp: float
    tyre_temp: tuple[float, float, float, float]
    packet_id: int
    lap_count: int
    total_laps: int
    best_lap_time: int
    last_lap_time: int
    day_progression: int
    race_start_position: int
    pre_race_num_cars: int
    min_alert_rpm: int
    max_alert_rpm: int
    calc_max_speed: int
    flags: SimulatorFlags
    gears: int
    throttle: int
    brake: int
    padding: int
    road_plane: tuple[float, float, float]
    road_plane_distance: float
    wheel_rps: tuple[float, float, float, float]
    tyre_radius: tuple[float, float, float, float]
    susp_height: tuple[float, float, float, float]
    unknown: tuple[int, ...]
    clutch: float
    clutch_engagement: float
    rpm_clutch_to_gearbox: float
    transmission_top_speed: float
    gear_ratios: tuple[float, ...]
    car_code: int

    def current_gear(self) -> int:
        """Current gear, held in the lower four bits of ``gears``."""
        return self.gears & 0x0F

    def suggested_gear(self) -> int:
        """Suggested gear, held in the upper four bits of ``gears``."""
        return self.gears >> 4

    def powertrain_type(self) -> int:
        """0 for combustion cars, 1 for electric cars, 2 for karts, 255 otherwise."""
        capacity = int(self.fuel_capacity)
        if capacity > 10:
            return 0
        return {0: 1, 5: 2}.get(capacity, 255)

    def tyre_speed(self, index: int) -> float:
        """Speed of one tyre in km/h; 0.0 for an index outside 0..3."""
        if not 0 <= index < 4:
            return 0.0
        return abs(3.6 * self.tyre_radius[index] * self.wheel_rps[index])

    def tyre_slip_ratio(self, index: int) -> float:
        """Tyre speed divided by car speed; 0.0 while the car stands still."""
        car_speed = self.speed * 3.6
        if car_speed == 0.0:
            return 0.0
        return self.tyre_speed(index) / car_speed

    def flag(self, index: int) -> bool:
        """Index 0 is set when no flag is; index n tests bit n-1. Valid indices are 0..13."""
        if not 0 <= index <= 13:
            return False
        if index == 0:
            return int(self.flags) == 0
        return bool(int(self.flags) & (1 << (index - 1)))


def decrypt_packet(data: bytes) -> bytes:
    """Decrypt the first PACKET_SIZE bytes of a datagram."""
    data = bytes(data)
    if len(data) < PACKET_SIZE:
        raise ValueError(f"packet must be at least {PACKET_SIZE} bytes, got {len(data)}")
    seed = int.from_bytes(data[_IV_OFFSET:_IV_OFFSET + 4], "little")
    iv = (seed ^ _IV_XOR).to_bytes(4, "little") + seed.to_bytes(4, "little")
    cipher = Salsa20(KEY)
    cipher.set_iv(iv)
    return cipher.process_bytes(data[:PACKET_SIZE])


def parse_packet(data: bytes) -> GT7Packet:
    """Build a packet from the first PACKET_SIZE bytes of decrypted data."""
    data = bytes(data)
    if len(data) < PACKET_SIZE:
        raise ValueError(f"packet must be at least {PACKET_SIZE} bytes, got {len(data)}")
    values = iter(_LAYOUT.unpack_from(data))

    def take(count: int) -> tuple:
        return tuple(islice(values, count))

    return GT7Packet(
        magic=next(values),
        position=take(3),
        world_velocity=take(3),
        rotation=take(3),
        orientation_relative_to_north=next(values),
        angular_velocity=take(3),
        body_height=next(values),
        engine_rpm=next(values),
        iv=next(values),
        fuel_level=next(values),
        fuel_capacity=next(values),
        speed=next(values),
        boost=next(values),
        oil_pressure=next(values),
        water_temp=next(values),
        oil_temp=next(values),
        tyre_temp=take(4),
        packet_id=next(values),
        lap_count=next(values),
        total_laps=next(values),
        best_lap_time=next(values),
        last_lap_time=next(values),
        day_progression=next(values),
        race_start_position=next(values),
        pre_race_num_cars=next(values),
        min_alert_rpm=next(values),
        max_alert_rpm=next(values),
        calc_max_speed=next(values),
        flags=SimulatorFlags(next(values)),
        gears=next(values),
        throttle=next(values),
        brake=next(values),
        padding=next(values),
        road_plane=take(3),
        road_plane_distance=next(values),
        wheel_rps=take(4),
        tyre_radius=take(4),
        susp_height=take(4),
        unknown=take(8),
        clutch=next(values),
        clutch_engagement=next(values),
        rpm_clutch_to_gearbox=next(values),
        transmission_top_speed=next(values),
        gear_ratios=take(8),
        car_code=next(values),
    )


class GT7Client:
    """Receives telemetry from a console and keeps it sending with heartbeats."""

    def __init__(
        self,
        playstation_ip: str,
        local_port: int = LOCAL_PORT,
        remote_port: int = REMOTE_PORT,
    ) -> None:
        self.playstation_ip = playstation_ip
        self.local_port = local_port
        self.remote_port = remote_port
        self._sock: socket.socket | None = None
        self._packet = parse_packet(bytes(PACKET_SIZE))

    def open(self) -> None:
        """Bind the local UDP socket; does nothing when already open."""
        if self._sock is not None:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(("", self.local_port))
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        self._sock = sock

    def close(self) -> None:
        """Release the socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> GT7Client:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("client is not open")
        return self._sock

    def send_heartbeat(self) -> None:
        """Ask the console to keep sending telemetry."""
        self._socket().sendto(HEARTBEAT, (self.playstation_ip, self.remote_port))

    def read_data(self) -> GT7Packet:
        """Return the newest packet; the previous one when nothing usable arrived."""
        sock = self._socket()
        try:
            datagram = sock.recv(_RECV_SIZE)
        except (BlockingIOError, InterruptedError):
            return self._packet
        if len(datagram) >= PACKET_SIZE:
            self._packet = parse_packet(decrypt_packet(datagram))
        return self._packet