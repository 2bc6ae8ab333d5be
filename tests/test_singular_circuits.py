"""
Test: ill-posed circuits fail loudly instead of producing numbers.
"""
import pytest


def floating_island():
    from mnacore import Ground, VoltageSource, Resistor

    return [
        Ground("g1", "gnd"),
        VoltageSource("vs1", "vin", "gnd", value=5.0),
        Resistor("r1", "vin", "gnd", 1000.0),
        Resistor("r2", "a", "b", 1000.0),  # no path to ground
    ]


def test_floating_island_transient():
    from mnacore.errors import SingularMatrixError
    from mnacore.timedomain import simulate, SimulationConfig

    with pytest.raises(SingularMatrixError) as exc_info:
        simulate(floating_island(), SimulationConfig(dt=1e-3, duration=1e-2))

    assert exc_info.value.column == 1
    assert exc_info.value.unknown == "V(b)"
    assert "V(b)" in str(exc_info.value)


def test_floating_island_symbolic():
    from mnacore.errors import SingularMatrixError
    from mnacore.laplace import solve_symbolic

    with pytest.raises(SingularMatrixError) as exc_info:
        solve_symbolic(floating_island())

    assert exc_info.value.unknown == "V(b)"


def test_parallel_voltage_sources():
    from mnacore import Ground, VoltageSource, Resistor
    from mnacore.errors import SingularMatrixError
    from mnacore.timedomain import simulate, SimulationConfig

    components = [
        Ground("g1", "gnd"),
        VoltageSource("vs1", "vin", "gnd", value=5.0),
        VoltageSource("vs2", "vin", "gnd", value=3.0),
        Resistor("r1", "vin", "gnd", 1000.0),
    ]
    with pytest.raises(SingularMatrixError):
        simulate(components, SimulationConfig(dt=1e-3, duration=1e-2))


def test_component_shorted_to_ground():
    """Every node collapsing to ground leaves no system to solve."""
    from mnacore import Ground, Resistor
    from mnacore.errors import SingularMatrixError
    from mnacore.laplace import solve_symbolic
    from mnacore.timedomain import simulate, SimulationConfig

    components = [Ground("g1", "gnd"), Resistor("r1", "gnd", "gnd", 1e3)]
    with pytest.raises(SingularMatrixError, match="ground to ground"):
        simulate(components, SimulationConfig(dt=1e-3, duration=2e-3))
    with pytest.raises(SingularMatrixError):
        solve_symbolic(components)


def test_singular_error_is_arithmetic_error():
    """Callers may catch the generic arithmetic failure."""
    from mnacore.timedomain import simulate, SimulationConfig

    with pytest.raises(ArithmeticError):
        simulate(floating_island(), SimulationConfig(dt=1e-3, duration=1e-3))


def test_missing_ground_is_configuration_error():
    from mnacore import VoltageSource, Resistor
    from mnacore.errors import ConfigurationError
    from mnacore.laplace import solve_symbolic
    from mnacore.timedomain import simulate

    components = [
        VoltageSource("vs1", "a", "b", value=5.0),
        Resistor("r1", "a", "b", 1000.0),
    ]
    with pytest.raises(ConfigurationError, match="ground"):
        simulate(components)
    with pytest.raises(ConfigurationError):
        solve_symbolic(components)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
