"""Hardware abstraction: displays, input, power, transports and boards."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional


class IconId(IntEnum):
    """Icons a display may draw."""

    NONE = 0


class TransportKind(IntEnum):
    """Physical link a transport runs over."""

    NONE = 0
    SERIAL = 1
    BLE = 2


class BleUiState(IntEnum):
    """Bluetooth state as shown to the user."""

    OFF = 0
    READY = 1
    PAIRING = 2
    CONNECTED = 3
    LOST = 4


@dataclass(frozen=True)
class TransportUiStatus:
    """Which transport is active and what the BLE side is doing."""

    active: TransportKind = TransportKind.NONE
    ble: BleUiState = BleUiState.OFF


class InputKind(IntEnum):
    """Kinds of input events a board can report."""

    BUTTON_PRESS = 0
    BUTTON_RELEASE = 1
    KEY_CHAR = 2
    TOUCH_TAP = 3
    TOUCH_LONG_PRESS = 4
    SHAKE = 5


@dataclass(frozen=True)
class InputEvent:
    """One input event: a key, button or touch at a point in time."""

    kind: InputKind
    code: int = 0
    x: int = 0
    y: int = 0
    t_ms: int = 0


class Display(ABC):
    """A simple text-and-rectangle display."""

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def draw_text(self, x: int, y: int, text: str, size: int) -> None: ...

    @abstractmethod
    def draw_icon(self, x: int, y: int, icon: IconId) -> None: ...

    @abstractmethod
    def fill_rect(self, x: int, y: int, w: int, h: int, rgb: int) -> None: ...

    @abstractmethod
    def push(self) -> None: ...

    @abstractmethod
    def set_brightness(self, pct: int) -> None: ...

    @abstractmethod
    def width(self) -> int: ...

    @abstractmethod
    def height(self) -> int: ...


class Input(ABC):
    """A source of input events."""

    @abstractmethod
    def poll(self) -> Optional[InputEvent]:
        """Return the next pending event, or None if there is none."""

    @abstractmethod
    def has_keyboard(self) -> bool: ...

    @abstractmethod
    def has_touch(self) -> bool: ...


class Power(ABC):
    """Battery and haptics."""

    @abstractmethod
    def battery_pct(self) -> int: ...

    @abstractmethod
    def charging(self) -> bool: ...

    def vibrate(self, ms: int) -> bool:
        """Vibrate for `ms` milliseconds.

        Returns whether a motor ran; boards without one return False.
        """
        if ms < 0:
            raise ValueError(f"vibration length must not be negative: {ms}")
        return False


class Transport(ABC):
    """A byte stream to the host."""

    @abstractmethod
    def begin(self) -> bool: ...

    @abstractmethod
    def connected(self) -> bool: ...

    @abstractmethod
    def read(self, n: int) -> bytes:
        """Read up to `n` bytes; an empty result means nothing is available."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write `data` and return the number of bytes accepted."""

    def kind(self) -> TransportKind:
        return TransportKind.NONE

    def ui_status(self) -> TransportUiStatus:
        return TransportUiStatus()


@dataclass
class Board:
    """The peripherals and identity of one device."""

    display: Optional[Display] = None
    input: Optional[Input] = None
    power: Optional[Power] = None
    transport: Optional[Transport] = None
    name: Optional[str] = None
    fw_ver: Optional[str] = None
    device_id: Optional[str] = None
    start_ble_pairing: Optional[Callable[[int], bool]] = None
    stop_ble_pairing: Optional[Callable[[], bool]] = None
    ble_pairing_active: Optional[Callable[[], bool]] = None
    ble_pair_code: Optional[Callable[[], str]] = None