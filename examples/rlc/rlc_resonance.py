"""
Example: Series RLC Resonance

Demonstrates series RLC circuit behavior:
- Resonant frequency: f_0 = 1 / (2 * pi * sqrt(L * C))
- Quality factor: Q = (1/R) * sqrt(L/C)
- Damping behavior: underdamped, critically damped, overdamped

Components used: R, L, C, VoltageSource
"""
import math

from mnacore import Ground, VoltageSource, Resistor, Inductor, Capacitor
from mnacore.laplace import solve_symbolic
from mnacore.timedomain import simulate, SimulationConfig


def build_simple_rlc(R_val, L_val, C_val, V_step=5.0):
    """Build series RLC for step response.

    Circuit:
        Vs ---[R]---[L]---+
                         [C]
                          |
                         GND
    """
    return [
        Ground("g1", "gnd"),
        VoltageSource("vs", "in", "gnd", value=V_step),
        Resistor("R1", "in", "rl", R_val),
        Inductor("L1", "rl", "mid", L_val),
        Capacitor("C1", "mid", "gnd", C_val),
    ]


def simulate_step_response(R_val=10.0, L_val=0.1, C_val=1e-5, V_step=5.0, n_periods=10):
    """Simulate step response showing resonance/damping behavior."""
    omega_0 = 1 / math.sqrt(L_val * C_val)
    period = 2 * math.pi / omega_0

    config = SimulationConfig(dt=period / 200, duration=n_periods * period)
    result = simulate(build_simple_rlc(R_val, L_val, C_val, V_step), config)
    return result


def main():
    print("=" * 60)
    print("Series RLC Resonance Example")
    print("=" * 60)

    L_val = 0.1
    C_val = 1e-5
    R_crit = 2 * math.sqrt(L_val / C_val)
    f_0 = 1 / (2 * math.pi * math.sqrt(L_val * C_val))
    print(f"\n   f_0 = {f_0:.1f} Hz, critical R = {R_crit:.1f} ohm")

    print(f"\n   {'R (ohm)':>10s}  {'Q':>8s}  {'peak V_C':>10s}  {'overshoot':>10s}")
    for R_val in [10.0, 50.0, R_crit, 500.0]:
        result = simulate_step_response(R_val, L_val, C_val)
        peak = float(result.v("mid").max())
        Q = math.sqrt(L_val / C_val) / R_val
        print(f"   {R_val:>10.1f}  {Q:>8.2f}  {peak:>10.4f}  {(peak / 5.0 - 1) * 100:>9.1f}%")
        print(f"   {'':>10s}  solve time {result.metrics.solve_ms:.1f} ms "
              f"for {result.metrics.steps} steps")

    print("\nSymbolic capacitor voltage:")
    solution = solve_symbolic(build_simple_rlc(10.0, L_val, C_val))
    node = solution.node_voltages["mid"]
    print(f"   V_C(s) = {node.voltage}")
    print(f"   LaTeX:   {node.voltage_latex}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
