"""Multiplex a serial and a BLE transport into one."""

from __future__ import annotations

from typing import Optional

from .hal import BleUiState, Transport, TransportKind, TransportUiStatus


class TransportMux(Transport):
    """Reads from whichever link has data; writes go to the last one heard.

    Serial takes precedence: data arriving on serial makes it the active
    link even while BLE is active.
    """

    def __init__(self, serial: Optional[Transport], ble: Optional[Transport]) -> None:
        self._serial = serial
        self._ble = ble
        self._active: Optional[Transport] = None

    def begin(self) -> bool:
        ok = True
        if self._serial is not None:
            ok = bool(self._serial.begin()) and ok
        if self._ble is not None:
            ok = bool(self._ble.begin()) and ok
        return ok

    def connected(self) -> bool:
        self._clear_inactive_active()
        return self._active is not None and self._active.connected()

    def read(self, n: int) -> bytes:
        self._clear_inactive_active()
        if self._serial is not None and self._serial.connected():
            got = self._serial.read(n)
            if got:
                self._active = self._serial
                return got
        if self._active is not None and self._active.connected():
            got = self._active.read(n)
            if got:
                return got
        if (
            self._ble is not None
            and self._ble is not self._active
            and self._ble.connected()
        ):
            got = self._ble.read(n)
            if got:
                self._active = self._ble
                return got
        return b""

    def write(self, data: bytes) -> int:
        self._clear_inactive_active()
        if self._active is None or not self._active.connected():
            return 0
        return self._active.write(data)

    def kind(self) -> TransportKind:
        if self._active is None:
            return TransportKind.NONE
        return self._active.kind()

    def ui_status(self) -> TransportUiStatus:
        ble = self._ble.ui_status().ble if self._ble is not None else BleUiState.OFF
        return TransportUiStatus(active=self.kind(), ble=ble)

    def _clear_inactive_active(self) -> None:
        if self._active is not None and not self._active.connected():
            self._active = None