"""
Avaliador de referência em texto claro.

Calcula o produto exato, elemento a elemento, dos operandos da cadeia.
"""

from typing import List, Sequence

import numpy as np


def make_operand(values: Sequence[float], range_limit: float = None) -> np.ndarray:
    """
    Cria um vetor operando imutável.

    Args:
        values: Valores reais do operando
        range_limit: Se informado, exige valores em [-range_limit, range_limit]

    Returns:
        np.ndarray: Vetor float64 somente leitura

    Raises:
        ValueError: Se o vetor for vazio, não finito ou fora do intervalo
    """
    operand = np.array(values, dtype=np.float64).ravel()

    if operand.size == 0:
        raise ValueError("Operando não pode ser vazio")

    if not np.all(np.isfinite(operand)):
        raise ValueError("Operando deve conter apenas valores finitos")

    if range_limit is not None and np.any(np.abs(operand) > range_limit):
        raise ValueError(
            f"Operando fora do intervalo [{-range_limit}, {range_limit}]: "
            f"max |x| = {np.max(np.abs(operand))}"
        )

    operand.flags.writeable = False
    return operand


def elementwise_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Produto elemento a elemento de dois vetores do mesmo tamanho."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Tamanhos diferentes: {a.shape} e {b.shape}")

    product = a * b
    product.flags.writeable = False
    return product


def running_products(operands: Sequence[np.ndarray]) -> List[np.ndarray]:
    """
    Produtos acumulados da cadeia: [A, A*B, A*B*C, ...].

    Args:
        operands: Operandos em ordem (pelo menos um)

    Returns:
        List[np.ndarray]: Um produto por prefixo da cadeia
    """
    if len(operands) == 0:
        raise ValueError("A cadeia precisa de pelo menos um operando")

    products = [make_operand(operands[0])]
    for operand in operands[1:]:
        products.append(elementwise_product(products[-1], operand))
    return products


def generate_random_data(
    size: int, low: float, high: float, rng: np.random.Generator = None
) -> np.ndarray:
    """
    Gera um vetor operando com valores reais uniformes em [low, high).

    Args:
        size: Número de elementos
        low: Limite inferior
        high: Limite superior
        rng: Gerador numpy (usa default_rng() se None)
    """
    if size <= 0:
        raise ValueError(f"Tamanho deve ser positivo: {size}")

    if low >= high:
        raise ValueError(f"Intervalo inválido: [{low}, {high})")

    if rng is None:
        rng = np.random.default_rng()

    return make_operand(rng.uniform(low=low, high=high, size=size))
