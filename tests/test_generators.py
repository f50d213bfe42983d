import numpy as np
import pytest

from gradient_studio.generators import PALETTE, PRESETS, fallback_gradient, preset, preset_names, random_gradient
from gradient_studio.model import KINDS


def test_random_invariants(rng):
    for _ in range(300):
        g = random_gradient(rng)
        positions = [s.position for s in g.stops]
        assert g.kind in KINDS
        assert 0 <= g.direction < 360
        assert len(g.stops) in {2, 3, 4}
        assert positions[0] == 0
        assert positions[-1] == 100
        assert positions == sorted(positions)
        assert all(10 <= p < 90 for p in positions[1:-1])
        assert all(s.color in PALETTE for s in g.stops)


def test_random_covers_all_kinds_and_counts(rng):
    seen = [random_gradient(rng) for _ in range(200)]
    assert {g.kind for g in seen} == set(KINDS)
    assert {len(g.stops) for g in seen} == {2, 3, 4}


def test_seeded_generators_repeat():
    a = random_gradient(np.random.default_rng(7))
    b = random_gradient(np.random.default_rng(7))
    assert a == b


def test_presets_lookup():
    assert preset_names() == ("Sunset", "Ocean", "Forest")
    assert preset("ocean") is PRESETS["Ocean"]
    with pytest.raises(KeyError):
        preset("Aurora")


def test_fallback_gradient(rng):
    g = fallback_gradient(rng)
    assert g.kind == "linear"
    assert 0 <= g.direction < 360
    assert [(s.color, s.position) for s in g.stops] == [("#667eea", 0), ("#764ba2", 100)]
