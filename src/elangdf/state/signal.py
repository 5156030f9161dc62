"""Operator-selected receiver parameters (memory only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SignalState:
    current_freq: float = 0.0
    current_gain: float = 0.0
    auto_mode: bool = False
    station_name: str = ""

    def set_frequency(self, freq: float) -> None:
        self.current_freq = freq

    def set_gain(self, gain: float) -> None:
        self.current_gain = gain

    def set_auto_mode(self, auto: bool) -> None:
        self.auto_mode = auto

    def set_station_name(self, name: str) -> None:
        self.station_name = name

    def reset(self) -> None:
        # Auto gain is the instrument's power-on default.
        self.current_freq = 0.0
        self.current_gain = 0.0
        self.auto_mode = True
        self.station_name = ""
