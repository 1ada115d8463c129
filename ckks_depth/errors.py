"""
Taxonomia de erros das cadeias de multiplicação CKKS.

- ChainExhausted e LevelMismatch são falhas estruturais: interrompem a execução.
- ScaleMismatch e PrecisionViolation são registradas no relatório e a
  execução continua até o fim.
"""

import math


class CKKSDepthError(Exception):
    """Erro base do pacote."""


class ChainExhausted(CKKSDepthError, ValueError):
    """Multiplicação ou rescale além do último nível utilizável da cadeia."""

    def __init__(self, level: int, max_level: int):
        self.level = level
        self.max_level = max_level
        super().__init__(
            f"Cadeia de módulos esgotada: nível {level} de {max_level}, "
            f"não há mais níveis para rescalonar"
        )


class LevelMismatch(CKKSDepthError, ValueError):
    """Operandos em níveis diferentes, ou tentativa de subir um nível."""

    def __init__(self, left_level: int, right_level: int, message: str = None):
        self.left_level = left_level
        self.right_level = right_level
        if message is None:
            message = (
                f"Ciphertexts devem estar no mesmo nível. "
                f"left: level={left_level}, right: level={right_level}"
            )
        super().__init__(message)


class ScaleMismatch(CKKSDepthError):
    """Escalas dos operandos diferem além da tolerância (recuperável)."""

    def __init__(self, left_scale: float, right_scale: float, nominal_scale: float):
        self.left_scale = left_scale
        self.right_scale = right_scale
        self.nominal_scale = nominal_scale
        super().__init__(
            f"Escalas diferentes: left=2^{_log2(left_scale):.6f}, "
            f"right=2^{_log2(right_scale):.6f}, nominal=2^{_log2(nominal_scale):.6f}"
        )


class PrecisionViolation(CKKSDepthError):
    """Resultado decifrado se afasta da referência além da tolerância."""

    def __init__(self, step: int, max_error: float, tolerance: float):
        self.step = step
        self.max_error = max_error
        self.tolerance = tolerance
        super().__init__(
            f"Passo {step}: erro máximo {max_error:.6e} excede a tolerância {tolerance}"
        )


def _log2(value: float) -> float:
    return math.log2(value) if value > 0 else float("-inf")
