"""
Testes para o passo de multiplicação com nível alinhado.
"""

import numpy as np
import pytest

from ckks_depth.errors import ChainExhausted, LevelMismatch
from ckks_depth.multiply import multiply_step
from ckks_depth.tests.doubles import NOMINAL_SCALE, FakeBackend


class TestMultiplyStep:
    """Testes para multiply -> relinearize -> rescale"""

    def setup_method(self):
        """Configuração executada antes de cada teste"""
        self.backend = FakeBackend(max_level=3)
        self.evaluator = self.backend.evaluator

    def test_postconditions(self):
        a = self.backend.encrypt([2.0, -3.0])
        b = self.backend.encrypt([1.5, 4.0])

        result = multiply_step(a, b, self.backend.relin_keys, self.evaluator)

        assert result.level == max(a.level, b.level) + 1
        assert result.size == 2
        assert result.scale == pytest.approx(NOMINAL_SCALE, rel=1e-4)
        np.testing.assert_allclose(
            self.backend.decrypt(result, 2), [3.0, -12.0], atol=1e-6
        )

    def test_stage_order(self):
        """A sequência de manutenção é fixa"""
        a = self.backend.encrypt([1.0])
        b = self.backend.encrypt([1.0])
        seen = []

        multiply_step(
            a,
            b,
            self.backend.relin_keys,
            self.evaluator,
            on_stage=lambda stage, ct: seen.append((stage, ct.size, ct.level)),
        )

        assert seen == [
            ("multiply", 3, 0),
            ("relinearize", 2, 0),
            ("rescale", 2, 1),
        ]
        assert self.evaluator.calls == ["multiply", "relinearize", "rescale_to_next"]

    def test_random_operands_within_tolerance(self):
        """Para vetores limitados, o erro fica dentro da tolerância"""
        rng = np.random.default_rng(3)
        for _ in range(10):
            a_values = rng.uniform(-100.0, 100.0, size=8)
            b_values = rng.uniform(-100.0, 100.0, size=8)

            result = multiply_step(
                self.backend.encrypt(a_values),
                self.backend.encrypt(b_values),
                self.backend.relin_keys,
                self.evaluator,
            )

            np.testing.assert_allclose(
                self.backend.decrypt(result, 8), a_values * b_values, atol=0.5
            )

    def test_chain_exhausted_after_max_level(self):
        """L passos funcionam; o passo L + 1 falha com ChainExhausted"""
        backend = FakeBackend(max_level=2)
        accum = backend.encrypt([1.1, 0.9])

        for step in range(2):
            operand = backend.encrypt([1.0, 1.0], level=accum.level)
            accum = multiply_step(accum, operand, backend.relin_keys, backend.evaluator)
            assert accum.level == step + 1

        operand = backend.encrypt([1.0, 1.0], level=accum.level)
        calls = len(backend.evaluator.calls)

        with pytest.raises(ChainExhausted, match="esgotada"):
            multiply_step(accum, operand, backend.relin_keys, backend.evaluator)

        # Verificado antes de qualquer operação
        assert len(backend.evaluator.calls) == calls

    def test_level_mismatch(self):
        a = self.backend.encrypt([1.0])
        b = self.backend.encrypt([1.0], level=1)

        with pytest.raises(LevelMismatch, match="mesmo nível"):
            multiply_step(a, b, self.backend.relin_keys, self.evaluator)

        assert self.evaluator.calls == ["mod_switch_to"]

    def test_requires_canonical_size(self):
        a = self.backend.encrypt([1.0])
        b = self.backend.encrypt([1.0])
        oversized = self.evaluator.multiply(a, b)

        with pytest.raises(ValueError, match="exatamente 2 componentes"):
            multiply_step(oversized, a, self.backend.relin_keys, self.evaluator)

    def test_inputs_not_modified(self):
        a = self.backend.encrypt([2.0])
        b = self.backend.encrypt([3.0])
        a_payload = a.payload.copy()

        multiply_step(a, b, self.backend.relin_keys, self.evaluator)

        assert a.level == 0
        assert a.size == 2
        assert a.scale == NOMINAL_SCALE
        np.testing.assert_array_equal(a.payload, a_payload)
