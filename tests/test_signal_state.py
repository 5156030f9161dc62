from __future__ import annotations

from elangdf.state.signal import SignalState


def test_reset_restores_power_on_defaults() -> None:
    state = SignalState()
    state.set_frequency(433.92)
    state.set_gain(20.7)
    state.set_auto_mode(False)
    state.set_station_name("ST-01")

    state.reset()

    assert state == SignalState(current_freq=0.0, current_gain=0.0, auto_mode=True, station_name="")
