"""Preset netlists shared by the tests (editor dict format)."""

import pytest


PRESETS = {
    "starter-supply": [
        {"id": "g1", "kind": "ground", "from": "n0", "to": "gnd"},
        {"id": "vs1", "kind": "voltage-source", "from": "vin", "to": "n0", "waveform": "dc", "value": 5},
        {"id": "r1", "kind": "resistor", "from": "vin", "to": "n0", "value": 1000},
    ],
    "rc-lowpass": [
        {"id": "g1", "kind": "ground", "from": "n0", "to": "gnd"},
        {
            "id": "vs1", "kind": "voltage-source", "from": "vin", "to": "n0",
            "waveform": "ac", "value": 0, "amplitude": 5, "frequency": 1000, "phase": 0, "offset": 0,
        },
        {"id": "r1", "kind": "resistor", "from": "vin", "to": "vout", "value": 10000},
        {"id": "c1", "kind": "capacitor", "from": "vout", "to": "n0", "value": 1e-6},
    ],
    "rlc-series": [
        {"id": "g1", "kind": "ground", "from": "n0", "to": "gnd"},
        {
            "id": "vs1", "kind": "voltage-source", "from": "vin", "to": "n0",
            "waveform": "ac", "value": 0, "amplitude": 3, "frequency": 500, "phase": 0, "offset": 0,
        },
        {"id": "r1", "kind": "resistor", "from": "vin", "to": "n1", "value": 50},
        {"id": "l1", "kind": "inductor", "from": "n1", "to": "n2", "value": 0.01},
        {"id": "c1", "kind": "capacitor", "from": "n2", "to": "n0", "value": 1e-6},
    ],
    "wheatstone-bridge": [
        {"id": "g1", "kind": "ground", "from": "n0", "to": "gnd"},
        {"id": "vs1", "kind": "voltage-source", "from": "vin", "to": "n0", "waveform": "dc", "value": 12},
        {"id": "r1", "kind": "resistor", "from": "vin", "to": "n1", "value": 1000},
        {"id": "r2", "kind": "resistor", "from": "n1", "to": "n0", "value": 1000},
        {"id": "r3", "kind": "resistor", "from": "vin", "to": "n2", "value": 1000},
        {"id": "r4", "kind": "resistor", "from": "n2", "to": "n0", "value": 1000},
        {"id": "r5", "kind": "resistor", "from": "n1", "to": "n2", "value": 10000},
    ],
}


@pytest.fixture(params=sorted(PRESETS))
def preset(request):
    """(name, components) for every preset netlist."""
    return request.param, PRESETS[request.param]


@pytest.fixture
def presets():
    return PRESETS
