"""Tests for Bloch-level and amplitude-level noise."""

import math

import numpy as np
import pytest

from qbloch.config import NoiseParams
from qbloch.noise import NoiseChannel, apply_noise, perturb_amplitudes, resolve_channel
from qbloch.simulator import norm_squared

VECTORS = [(0.6, -0.3, 0.5), (0.0, 0.0, 1.0), (-0.2, 0.9, -0.1)]


class AlwaysFlip:
    """Stand-in generator whose draws always fall under p."""

    def random(self, size=None):
        return 0.0 if size is None else np.zeros(size)


class NeverFlip:
    def random(self, size=None):
        return 0.999999 if size is None else np.full(size, 0.999999)


class TestResolveChannel:
    def test_names(self):
        assert resolve_channel("depolarizing") is NoiseChannel.DEPOLARIZING
        assert resolve_channel("Amplitude") is NoiseChannel.AMPLITUDE_DAMPING
        assert resolve_channel("phase_damping") is NoiseChannel.PHASE_DAMPING
        assert resolve_channel(NoiseChannel.NONE) is NoiseChannel.NONE

    def test_unknown(self):
        with pytest.raises(ValueError):
            resolve_channel("thermal")


class TestDeterministicChannels:
    def test_none_is_identity(self):
        assert apply_noise(VECTORS, "none", 0.5) == [tuple(v) for v in VECTORS]

    def test_depolarizing_scales(self):
        out = apply_noise(VECTORS, "depolarizing", 0.25)
        assert out[0] == pytest.approx((0.45, -0.225, 0.375))

    @pytest.mark.parametrize("p", np.linspace(0, 1, 11))
    def test_depolarizing_never_grows(self, p):
        for before, after in zip(VECTORS, apply_noise(VECTORS, "depolarizing", p)):
            assert np.linalg.norm(after) <= np.linalg.norm(before) + 1e-12

    def test_amplitude_damping(self):
        out = apply_noise([(0.6, -0.3, -0.5)], "amplitude", 0.36)
        assert out[0] == pytest.approx((0.6 * 0.8, -0.3 * 0.8, -0.5 * 0.64 + 0.36))

    def test_full_amplitude_damping_reaches_ground(self):
        out = apply_noise(VECTORS, NoiseChannel.AMPLITUDE_DAMPING, 1.0)
        for v in out:
            assert v == pytest.approx((0.0, 0.0, 1.0))

    def test_phase_damping_keeps_rz(self):
        out = apply_noise(VECTORS, "phase", 0.75)
        for before, after in zip(VECTORS, out):
            assert after[2] == before[2]
            assert after[0] == pytest.approx(before[0] * 0.5)
            assert after[1] == pytest.approx(before[1] * 0.5)


class TestStochasticChannels:
    def test_bitflip_negates_x_and_z(self):
        out = apply_noise(VECTORS, "bitflip", 0.5, rng=AlwaysFlip())
        assert out[0] == pytest.approx((-0.6, -0.3, -0.5))

    def test_phaseflip_negates_x_and_y(self):
        out = apply_noise(VECTORS, "phaseflip", 0.5, rng=AlwaysFlip())
        assert out[0] == pytest.approx((-0.6, 0.3, 0.5))

    def test_no_flip_when_draw_exceeds_p(self):
        out = apply_noise(VECTORS, "bitflip", 0.5, rng=NeverFlip())
        assert out == [tuple(v) for v in VECTORS]

    def test_seeded_generator_is_reproducible(self):
        a = apply_noise(VECTORS * 10, "bitflip", 0.5, rng=np.random.default_rng(42))
        b = apply_noise(VECTORS * 10, "bitflip", 0.5, rng=np.random.default_rng(42))
        assert a == b

    def test_flips_preserve_magnitude(self):
        out = apply_noise(VECTORS, "phaseflip", 0.5, rng=np.random.default_rng(0))
        for before, after in zip(VECTORS, out):
            assert np.linalg.norm(after) == pytest.approx(np.linalg.norm(before))


class TestPerturbAmplitudes:
    def test_noiseless_is_identity(self):
        psi = np.array([1, 0, 0, 1j]) / math.sqrt(2)
        out = perturb_amplitudes(psi, 2, NoiseParams.noiseless(), np.random.default_rng(0))
        assert np.allclose(out, psi)

    def test_result_is_normalized(self):
        psi = np.full(8, 1 / math.sqrt(8), dtype=complex)
        out = perturb_amplitudes(psi, 3, NoiseParams(1.0, 0.5, 0.5), np.random.default_rng(3))
        assert norm_squared(out) == pytest.approx(1.0)

    def test_certain_bit_flip_applies_x_to_every_qubit(self):
        psi = np.zeros(4, dtype=complex)
        psi[0] = 1
        out = perturb_amplitudes(psi, 2, NoiseParams(0.0, 1.0, 0.0), AlwaysFlip())
        assert np.allclose(out, [0, 0, 0, 1])

    def test_certain_phase_flip_applies_z(self):
        psi = np.array([1, 1], dtype=complex) / math.sqrt(2)
        out = perturb_amplitudes(psi, 1, NoiseParams(0.0, 0.0, 1.0), AlwaysFlip())
        assert np.allclose(out, [1 / math.sqrt(2), -1 / math.sqrt(2)])

    def test_input_not_mutated(self):
        psi = np.array([0.6, 0.8], dtype=complex)
        before = psi.copy()
        perturb_amplitudes(psi, 1, NoiseParams(1.0, 1.0, 1.0), np.random.default_rng(1))
        assert np.array_equal(psi, before)


class TestNoiseParams:
    def test_defaults(self):
        params = NoiseParams()
        assert params.depolarization_rate == 0.01
        assert params.bit_flip_rate == 0.002

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            NoiseParams(depolarization_rate=1.5)
