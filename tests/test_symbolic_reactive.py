"""
Test: symbolic capacitor and inductor stamps.

RC lowpass:  V_out(s) = V / (1 + s*R*C)
RL series:   I_L(s)   = V / (R + s*L)
"""
import math
import pytest


def test_rc_lowpass_transfer(presets):
    import sympy
    from mnacore.laplace import solve_symbolic, evaluate, s

    result = solve_symbolic(presets["rc-lowpass"])
    V, R, C = sympy.symbols("V_vs1 R_r1 C_c1")

    v_out = result.node_voltages["vout"].voltage
    assert sympy.simplify(v_out - V / (1 + s * R * C)) == 0

    # AC source level is offset + amplitude
    assert result.parameters[V] == 5.0
    assert abs(evaluate(result, v_out) - 5.0) < 1e-12

    # -3 dB at the corner frequency
    corner = 1j / (10000.0 * 1e-6)
    magnitude = abs(evaluate(result, v_out, corner))
    assert abs(magnitude - 5.0 / math.sqrt(2)) < 1e-9


def test_rl_branch_current():
    import sympy
    from mnacore import Ground, VoltageSource, Inductor, Resistor
    from mnacore.laplace import solve_symbolic, evaluate, s

    result = solve_symbolic([
        Ground("g1", "gnd"),
        VoltageSource("vs1", "n1", "gnd", value=5.0),
        Inductor("l1", "n1", "n2", 10e-3),
        Resistor("r1", "n2", "gnd", 100.0),
    ])
    V, L, R = sympy.symbols("V_vs1 L_l1 R_r1")

    i_l = result.branch_currents["l1"]
    assert sympy.simplify(i_l - V / (R + s * L)) == 0
    # Source current flows from + terminal through the source
    assert sympy.simplify(result.branch_currents["vs1"] + i_l) == 0
    assert result.component_currents["l1"] == i_l

    assert abs(evaluate(result, i_l) - 0.05) < 1e-12


def test_capacitor_blocks_dc():
    from mnacore import Ground, VoltageSource, Capacitor, Resistor
    from mnacore.laplace import solve_symbolic, evaluate

    result = solve_symbolic([
        Ground("g1", "gnd"),
        VoltageSource("vs1", "a", "gnd", value=1.0),
        Capacitor("c1", "a", "b", 1e-6),
        Resistor("r1", "b", "gnd", 1000.0),
    ])
    v_b = result.node_voltages["b"].voltage
    assert evaluate(result, v_b, 0) == 0.0
    assert abs(evaluate(result, v_b, 1e9) - 1.0) < 1e-3


def test_evaluate_takes_limit_at_removable_singularity():
    import sympy
    from mnacore.laplace import SymbolicResult, evaluate, s

    result = SymbolicResult({}, {}, {}, (), {})
    assert evaluate(result, sympy.sin(s) / s, 0) == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
