"""
Example: RC Low-Pass Filter

Demonstrates first-order RC low-pass filter behavior in both domains:
- Transient step response: V_out(t) = V * (1 - exp(-t / RC))
- Closed form in s: H(s) = 1 / (1 + s*R*C)
- At f_c = 1 / (2 * pi * R * C) the output is -3dB (0.707x)

Components used: R, C, VoltageSource
"""
import math
import os

from mnacore import Ground, VoltageSource, Resistor, Capacitor
from mnacore.log_config import setup_logging
from mnacore.laplace import solve_symbolic, evaluate
from mnacore.timedomain import simulate, SimulationConfig


def build_lowpass_filter(R_val=1000.0, C_val=1e-6, V_step=5.0):
    """Build RC low-pass filter.

    Circuit:
        Vin ---[R]---+--- Vout
                     |
                    [C]
                     |
                    GND
    """
    return [
        Ground("g1", "gnd"),
        VoltageSource("vs", "in", "gnd", value=V_step),
        Resistor("R1", "in", "out", R_val),
        Capacitor("C1", "out", "gnd", C_val),
    ]


def simulate_step_response(R_val=1000.0, C_val=1e-6, V_step=5.0, n_tau=5):
    """Simulate step response and return time/voltage arrays."""
    tau = R_val * C_val
    config = SimulationConfig(dt=tau / 100, duration=n_tau * tau)
    result = simulate(build_lowpass_filter(R_val, C_val, V_step), config)
    return result.time, result.v("out")


def frequency_response(R_val=1000.0, C_val=1e-6, frequencies=None):
    """Evaluate |H(j*2*pi*f)| from the symbolic solution."""
    f_c = 1 / (2 * math.pi * R_val * C_val)
    if frequencies is None:
        frequencies = [f_c * mult for mult in [0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0]]

    solution = solve_symbolic(build_lowpass_filter(R_val, C_val, V_step=1.0))
    v_out = solution.node_voltages["out"].voltage

    results = []
    for freq in frequencies:
        magnitude = abs(evaluate(solution, v_out, 2j * math.pi * freq))
        results.append({
            "freq": freq,
            "magnitude": magnitude,
            "magnitude_db": 20 * math.log10(magnitude),
        })
    return solution, results


def plot_step_response(times, voltages, filename="lowpass_step.png"):
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not available, skipping plots")
        return

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot([t * 1e3 for t in times], voltages)
    ax.set_xlabel("Time (ms)")
    ax.set_ylabel("V_out (V)")
    ax.set_title("RC Low-Pass Step Response")
    ax.grid(True, alpha=0.3)
    script_dir = os.path.dirname(os.path.abspath(__file__))
    plt.savefig(os.path.join(script_dir, filename), dpi=150)
    plt.close()


def main():
    setup_logging()

    print("=" * 60)
    print("RC Low-Pass Filter Example")
    print("=" * 60)

    R_val = 1000.0   # 1k ohm
    C_val = 1e-6     # 1 uF
    tau = R_val * C_val
    f_c = 1 / (2 * math.pi * tau)

    print(f"\nFilter Parameters:")
    print(f"   R = {R_val:.0f} ohm")
    print(f"   C = {C_val*1e6:.1f} uF")
    print(f"   tau = R*C = {tau*1000:.3f} ms")
    print(f"   f_c = 1/(2*pi*tau) = {f_c:.1f} Hz")

    print("\n1. Step Response")
    print("-" * 40)
    times, voltages = simulate_step_response(R_val, C_val, V_step=5.0, n_tau=5)
    for target_tau in [1, 2, 3, 4]:
        idx = int(round(target_tau * tau / float(times[1])))
        expected = 5.0 * (1 - math.exp(-target_tau))
        print(f"   At t={target_tau}*tau: V_out = {float(voltages[idx]):.4f} V "
              f"(expected: {expected:.4f} V)")

    print("\n2. Frequency Response (symbolic)")
    print("-" * 40)
    solution, ac_results = frequency_response(R_val, C_val)
    print(f"   V_out(s) = {solution.node_voltages['out'].voltage}")
    print(f"   {'Freq':>10s}  {'f/f_c':>8s}  {'|H|':>8s}  {'dB':>8s}  {'Expected dB':>12s}")
    for r in ac_results:
        f_ratio = r["freq"] / f_c
        expected_db = 20 * math.log10(1 / math.sqrt(1 + f_ratio**2))
        print(f"   {r['freq']:>10.1f}  {f_ratio:>8.2f}  {r['magnitude']:>8.4f}  "
              f"{r['magnitude_db']:>8.2f}  {expected_db:>12.2f}")

    plot_step_response(times, voltages)
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
