"""
Test: RLC circuit resonance.

A series RLC circuit has resonant frequency f0 = 1/(2*pi*sqrt(LC)).
With low R, it should oscillate. With high R, it should be overdamped.

This validates:
- Inductor and capacitor companion models together
- RLC interaction
"""
import math
import pytest


def build_rlc(L_val, R_val, C_val, V=5.0):
    from mnacore import Ground, VoltageSource, Resistor, Inductor, Capacitor

    # Circuit: Vs -- L -- R -- C -- GND
    return [
        Ground("g1", "gnd"),
        VoltageSource("vs", "n1", "gnd", value=V),
        Inductor("L1", "n1", "n2", L_val),
        Resistor("R1", "n2", "n3", R_val),
        Capacitor("C1", "n3", "gnd", C_val),
    ]


def test_rlc_underdamped_oscillation():
    """Underdamped RLC should ring at approximately the damped natural frequency."""
    from mnacore.timedomain import simulate, SimulationConfig

    L_val = 1e-3   # 1 mH
    R_val = 10.0   # 10 ohms
    C_val = 1e-6   # 1 µF

    f0 = 1.0 / (2.0 * math.pi * math.sqrt(L_val * C_val))  # ~5033 Hz
    T0 = 1.0 / f0
    alpha = R_val / (2 * L_val)
    omega_d = math.sqrt(1.0 / (L_val * C_val) - alpha ** 2)
    T_d = 2 * math.pi / omega_d

    result = simulate(build_rlc(L_val, R_val, C_val), SimulationConfig(dt=1e-6, duration=3 * T0))
    times = [float(t) for t in result.time]
    v_c = [float(v) - 5.0 for v in result.v("n3")]

    # Sign changes of (v_c - V) occur every half period
    crossings = []
    for k in range(1, len(v_c)):
        if (v_c[k - 1] < 0) != (v_c[k] < 0):
            crossings.append(times[k])

    assert len(crossings) >= 4, f"Expected ringing, got {len(crossings)} crossings"
    half_periods = [b - a for a, b in zip(crossings[1:-1], crossings[2:])]
    period = 2 * sum(half_periods) / len(half_periods)

    assert abs(period - T_d) / T_d < 0.05, f"Period {period*1e6:.1f}µs vs {T_d*1e6:.1f}µs"

    # Overshoot above the source voltage
    assert max(v_c) > 0.5


def test_rlc_overdamped_no_overshoot():
    """Overdamped RLC should approach the source voltage without overshoot."""
    from mnacore.timedomain import simulate, SimulationConfig

    L_val = 1e-3
    R_val = 1000.0  # critical R = 2*sqrt(L/C) ≈ 63 ohm
    C_val = 1e-6

    result = simulate(build_rlc(L_val, R_val, C_val), SimulationConfig(dt=1e-6, duration=5e-3))
    v_c = result.v("n3")

    assert float(v_c.max()) <= 5.0 + 1e-9
    assert float(v_c[-1]) > 0.9 * 5.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
