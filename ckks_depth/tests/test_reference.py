"""
Testes para o avaliador de referência em texto claro.
"""

import numpy as np
import pytest

from ckks_depth.reference import (
    elementwise_product,
    generate_random_data,
    make_operand,
    running_products,
)

A = [2.0, -3.0]
B = [1.5, 4.0]
C = [0.5, -2.0]
D = [10.0, 1.0]


class TestMakeOperand:
    """Testes para a criação de operandos"""

    def test_operand_is_read_only(self):
        operand = make_operand([1.0, 2.0, 3.0])

        assert operand.dtype == np.float64
        with pytest.raises(ValueError):
            operand[0] = 5.0

    def test_source_is_not_aliased(self):
        source = np.array([1.0, 2.0])
        operand = make_operand(source)
        source[0] = 99.0

        assert operand[0] == 1.0

    def test_range_limit(self):
        make_operand([-100.0, 100.0], range_limit=100.0)

        with pytest.raises(ValueError, match="fora do intervalo"):
            make_operand([100.5], range_limit=100.0)

    def test_rejects_empty_and_non_finite(self):
        with pytest.raises(ValueError, match="vazio"):
            make_operand([])

        with pytest.raises(ValueError, match="finitos"):
            make_operand([1.0, np.nan])


class TestProducts:
    """Testes para os produtos exatos"""

    def test_elementwise_product(self):
        np.testing.assert_array_equal(elementwise_product(A, B), [3.0, -12.0])

    def test_elementwise_product_length_mismatch(self):
        with pytest.raises(ValueError, match="Tamanhos diferentes"):
            elementwise_product([1.0, 2.0], [1.0])

    def test_running_products_abcd(self):
        """A, AB, ABC, ABCD para o exemplo de referência"""
        products = running_products([A, B, C, D])

        assert len(products) == 4
        np.testing.assert_array_equal(products[1], [3.0, -12.0])
        np.testing.assert_array_equal(products[2], [1.5, 24.0])
        np.testing.assert_array_equal(products[3], [15.0, 24.0])

    def test_running_products_empty(self):
        with pytest.raises(ValueError, match="pelo menos um operando"):
            running_products([])


class TestGenerateRandomData:
    """Testes para a geração de dados aleatórios"""

    def test_values_in_range(self):
        data = generate_random_data(1000, -100.0, 100.0, np.random.default_rng(7))

        assert data.size == 1000
        assert np.all(data >= -100.0)
        assert np.all(data < 100.0)

    def test_seed_is_reproducible(self):
        first = generate_random_data(10, -1.0, 1.0, np.random.default_rng(42))
        second = generate_random_data(10, -1.0, 1.0, np.random.default_rng(42))

        np.testing.assert_array_equal(first, second)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError, match="positivo"):
            generate_random_data(0, -1.0, 1.0)

        with pytest.raises(ValueError, match="Intervalo inválido"):
            generate_random_data(5, 1.0, -1.0)
