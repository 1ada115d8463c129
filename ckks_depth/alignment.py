"""
Alinhamento de nível e reconciliação de escala entre operandos.

Antes de uma multiplicação os dois operandos precisam estar no mesmo nível
e com a mesma escala (dentro de uma tolerância relativa).
"""

import logging
import math

from .errors import LevelMismatch, ScaleMismatch

logger = logging.getLogger(__name__)


def align(operand, target_level: int, evaluator):
    """
    Leva o operando até o nível alvo por troca de módulo.

    - nível atual < alvo: desce até o alvo (exato, não altera o valor)
    - nível atual == alvo: devolve o próprio operando (idempotente)
    - nível atual > alvo: defeito interno, a cadeia nunca precisa subir de nível

    Args:
        operand: Ciphertext a alinhar
        target_level: Nível de destino
        evaluator: Avaliador com mod_switch_to

    Raises:
        LevelMismatch: Se o operando já estiver abaixo do nível alvo
        ChainExhausted: Se o nível alvo estiver além do fundo da cadeia
    """
    if operand.level == target_level:
        return operand

    if operand.level > target_level:
        raise LevelMismatch(
            operand.level,
            target_level,
            f"Operando no nível {operand.level} não pode subir para o nível "
            f"{target_level}",
        )

    logger.debug("mod switch: nível %d -> %d", operand.level, target_level)
    return evaluator.mod_switch_to(operand, target_level)


def scales_close(scale_a: float, scale_b: float, rel_tolerance: float) -> bool:
    """Compara duas escalas com tolerância relativa."""
    return math.isclose(scale_a, scale_b, rel_tol=rel_tolerance, abs_tol=0.0)


def check_operand_scale(a, b, rel_tolerance: float = 1e-12) -> bool:
    """
    Verifica se dois operandos podem ser combinados sem correção de escala.

    Returns:
        bool: True se as escalas coincidem dentro da tolerância
    """
    return scales_close(a.scale, b.scale, rel_tolerance)


def reconcile_scale(a, b, nominal_scale: float, rel_tolerance: float = 1e-12):
    """
    Corrige a deriva de escala entre dois operandos.

    Se as escalas divergem além da tolerância, todo operando cuja escala não
    esteja dentro da tolerância da escala nominal recebe a escala nominal.
    A correção altera apenas o metadado; o conteúdo criptografado não muda.
    Nunca calcula média nem estima outra escala.

    Args:
        a: Primeiro operando
        b: Segundo operando
        nominal_scale: Escala de referência (a mesma das criptografias novas)
        rel_tolerance: Diferença relativa máxima aceita

    Returns:
        Tuple: (a', b', ScaleMismatch ou None)
    """
    if check_operand_scale(a, b, rel_tolerance):
        return a, b, None

    fix_a = not scales_close(a.scale, nominal_scale, rel_tolerance)
    fix_b = not scales_close(b.scale, nominal_scale, rel_tolerance)
    if not (fix_a or fix_b):
        # Ambos dentro da tolerância da nominal: nada a corrigir
        logger.debug(
            "Escalas %.6e e %.6e próximas da nominal; sem correção", a.scale, b.scale
        )
        return a, b, None

    mismatch = ScaleMismatch(a.scale, b.scale, nominal_scale)
    logger.warning("%s; forçando escala nominal", mismatch)

    if fix_a:
        a = a.with_scale(nominal_scale)
    if fix_b:
        b = b.with_scale(nominal_scale)

    return a, b, mismatch
