"""
Test: symbolic solution of resistive networks.

Validates the closed form against hand analysis and against the transient
solver's DC operating point.
"""
import pytest


def build_divider():
    from mnacore import Ground, VoltageSource, Resistor

    return [
        Ground("g1", "gnd"),
        VoltageSource("vs1", "vin", "gnd", value=12.0),
        Resistor("r1", "vin", "mid", 1000.0),
        Resistor("r2", "mid", "gnd", 1000.0),
    ]


def test_divider_closed_form():
    import sympy
    from mnacore.laplace import solve_symbolic, parameter_symbol

    components = build_divider()
    result = solve_symbolic(components)

    V, R1, R2 = (parameter_symbol(c) for c in components[1:])
    assert str(V) == "V_vs1"
    assert str(R1) == "R_r1"

    v_mid = result.node_voltages["mid"].voltage
    assert sympy.simplify(v_mid - V * R2 / (R1 + R2)) == 0
    assert result.node_voltages["vin"].voltage == V
    assert result.variables == ("mid", "vin")
    assert result.parameters == {V: 12.0, R1: 1000.0, R2: 1000.0}


def test_divider_matches_transient():
    from mnacore.laplace import solve_symbolic, evaluate
    from mnacore.timedomain import simulate, SimulationConfig

    components = build_divider()
    symbolic = solve_symbolic(components)
    transient = simulate(components, SimulationConfig(dt=1e-3, duration=2e-3))

    for node in ("vin", "mid"):
        v_s = evaluate(symbolic, symbolic.node_voltages[node].voltage)
        assert abs(v_s - float(transient.v(node)[-1])) < 1e-9

    i_s = evaluate(symbolic, symbolic.component_currents["r1"])
    assert abs(i_s - float(transient.i("r1")[-1])) < 1e-12


def test_numeric_values_inline():
    import sympy
    from mnacore.laplace import solve_symbolic

    result = solve_symbolic(build_divider(), symbolic_values=False)

    assert result.node_voltages["mid"].voltage == 6
    assert result.parameters == {}
    assert result.branch_currents["vs1"] == sympy.Rational(-3, 500)


def test_node_currents_vanish(presets):
    import sympy
    from mnacore.laplace import solve_symbolic

    for name, components in presets.items():
        result = solve_symbolic(components)
        for node, sol in result.node_voltages.items():
            assert sympy.simplify(sol.current) == 0, (name, node)


def test_latex_renderings():
    from mnacore.laplace import solve_symbolic

    result = solve_symbolic(build_divider())
    mid = result.node_voltages["mid"]

    assert "R_{r2}" in mid.voltage_latex
    assert "V_{vs1}" in mid.voltage_latex
    assert mid.current_latex == "0"
    assert result.latex(result.branch_currents["vs1"]).startswith("-")


def test_current_source_injection():
    from mnacore import Ground, CurrentSource, Resistor
    from mnacore.laplace import solve_symbolic

    result = solve_symbolic(
        [
            Ground("g1", "gnd"),
            CurrentSource("is1", "n1", "gnd", value=2e-3),
            Resistor("r1", "n1", "gnd", 1000.0),
        ],
        symbolic_values=False,
    )
    assert result.node_voltages["n1"].voltage == 2
    assert result.component_currents["is1"] == result.component_currents["r1"]


def test_similar_ids_get_distinct_symbols():
    """Ids differing only in punctuation must not share a symbol."""
    from mnacore import Ground, VoltageSource, Resistor
    from mnacore.laplace import solve_symbolic, evaluate

    result = solve_symbolic([
        Ground("g1", "gnd"),
        VoltageSource("vs1", "vin", "gnd", value=12.0),
        Resistor("r-1", "vin", "mid", 1000.0),
        Resistor("r_1", "mid", "gnd", 3000.0),
    ])

    assert len(result.parameters) == 3
    assert sorted(str(sym) for sym in result.parameters) == ["R_r-1", "R_r_1", "V_vs1"]
    assert abs(evaluate(result, result.node_voltages["mid"].voltage) - 9.0) < 1e-12


def test_empty_and_ground_only():
    from mnacore import Ground
    from mnacore.errors import ConfigurationError
    from mnacore.laplace import solve_symbolic

    with pytest.raises(ConfigurationError):
        solve_symbolic([])

    result = solve_symbolic([Ground("g1", "gnd")])
    assert result.node_voltages == {}
    assert result.variables == ()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
