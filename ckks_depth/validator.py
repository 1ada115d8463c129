"""
Validação de corretude de um ciphertext contra a referência exata.
"""

from typing import NamedTuple

import numpy as np


class ValidationResult(NamedTuple):
    passed: bool
    max_error: float


def fit_length(values: np.ndarray, length: int) -> np.ndarray:
    """Trunca ou completa com zeros até o tamanho indicado."""
    values = np.asarray(values, dtype=np.float64).ravel()
    if values.size >= length:
        return values[:length]
    return np.pad(values, (0, length - values.size), mode="constant")


def max_abs_error(decoded: np.ndarray, expected: np.ndarray) -> float:
    expected = np.asarray(expected, dtype=np.float64).ravel()
    decoded = fit_length(decoded, expected.size)
    return float(np.max(np.abs(decoded - expected)))


def validate(cipher, expected, tolerance: float, decryptor, encoder) -> ValidationResult:
    """
    Decriptografa, decodifica e compara com o vetor esperado.

    Nunca interrompe a execução: sempre devolve o erro medido.

    Args:
        cipher: Ciphertext a verificar (tamanho 2 ou 3)
        expected: Vetor de referência exato
        tolerance: Erro absoluto máximo aceito
        decryptor: Objeto com decrypt(ciphertext) -> plaintext
        encoder: Objeto com decode(plaintext) -> vetor real

    Returns:
        ValidationResult: (passed, max_error) com passed = max_error <= tolerance
    """
    if tolerance < 0:
        raise ValueError(f"Tolerância não pode ser negativa: {tolerance}")

    decoded = encoder.decode(decryptor.decrypt(cipher))
    error = max_abs_error(decoded, expected)

    # NaN nunca passa
    return ValidationResult(bool(error <= tolerance), error)
