"""
Passo de multiplicação com nível alinhado.

multiply -> relinearize -> rescale: o resultado volta ao tamanho canônico
(2 componentes), à escala nominal e fica um nível abaixo dos operandos.
"""

import logging

from .errors import ChainExhausted, LevelMismatch

logger = logging.getLogger(__name__)

STAGE_MULTIPLY = "multiply"
STAGE_RELINEARIZE = "relinearize"
STAGE_RESCALE = "rescale"


def multiply_step(left, right, relin_keys, evaluator, on_stage=None):
    """
    Multiplica dois ciphertexts e faz a manutenção obrigatória.

    Processo:
    1. Multiplicação raw (3 componentes, escala ~ produto das escalas)
    2. Relinearização com as chaves rlk (2 componentes, exata)
    3. Rescale para o próximo primo (nível + 1, escala ~ nominal)

    As pré-condições são verificadas antes de qualquer operação, de modo
    que o esgotamento da cadeia nunca é descoberto no meio do passo.

    Args:
        left: Acumulador
        right: Operando já alinhado ao nível do acumulador
        relin_keys: Chaves de relinearização
        evaluator: Avaliador homomórfico
        on_stage: Callback opcional on_stage(nome, ciphertext) chamado após
            cada etapa

    Returns:
        Ciphertext de 2 componentes no nível max(left.level, right.level) + 1

    Raises:
        ChainExhausted: Se não houver nível para o rescale
        LevelMismatch: Se os operandos estiverem em níveis diferentes
        ValueError: Se algum operando não tiver 2 componentes
    """
    for operand in (left, right):
        if operand.remaining_levels <= 0:
            raise ChainExhausted(operand.level, evaluator.max_level)

    if left.level != right.level:
        raise LevelMismatch(left.level, right.level)

    if left.size != 2 or right.size != 2:
        raise ValueError(
            f"Operandos devem ter exatamente 2 componentes. "
            f"left.size={left.size}, right.size={right.size}"
        )

    target_level = max(left.level, right.level) + 1

    # Etapa 1: Multiplicação raw (2 componentes -> 3 componentes)
    product = evaluator.multiply(left, right)
    logger.debug("multiply: size=%d, scale=%.6e", product.size, product.scale)
    if on_stage is not None:
        on_stage(STAGE_MULTIPLY, product)

    # Etapa 2: Relinearização (3 componentes -> 2 componentes)
    relinearized = evaluator.relinearize(product, relin_keys)
    logger.debug("relinearize: size=%d", relinearized.size)
    if on_stage is not None:
        on_stage(STAGE_RELINEARIZE, relinearized)

    # Etapa 3: Rescale (nível + 1, escala / q)
    rescaled = evaluator.rescale_to_next(relinearized)
    logger.debug("rescale: level=%d, scale=%.6e", rescaled.level, rescaled.scale)
    if on_stage is not None:
        on_stage(STAGE_RESCALE, rescaled)

    if rescaled.level != target_level:
        raise LevelMismatch(
            rescaled.level,
            target_level,
            f"Rescale produziu nível {rescaled.level}, esperado {target_level}",
        )

    return rescaled
