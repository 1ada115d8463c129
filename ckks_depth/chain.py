"""
Orquestrador da cadeia de multiplicação.

Trata os operandos como um fold à esquerda (A -> AB -> ABC -> ABCD),
mantendo em paralelo o acumulador criptografado e o acumulador em texto
claro, e valida o resultado a cada passo.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import numpy as np

from .alignment import align, reconcile_scale
from .errors import ChainExhausted, LevelMismatch, PrecisionViolation, ScaleMismatch
from .multiply import multiply_step
from .reference import elementwise_product, make_operand
from .validator import ValidationResult, validate

logger = logging.getLogger(__name__)

STAGE_ENCRYPT = "encrypt"
STAGE_MOD_SWITCH = "mod_switch"
STAGE_SCALE_FIX = "scale_fix"


class RunStatus(enum.Enum):
    PASSED = "passed"
    FAILED = "failed"  # houve PrecisionViolation em algum passo
    FATAL = "fatal"  # ChainExhausted ou LevelMismatch interrompeu a execução


@dataclass
class StageCheck:
    """Verificação intermediária dentro de um passo."""

    stage: str
    passed: bool
    max_error: float


@dataclass
class StepReport:
    """Resultado do passo i da cadeia (acumulador * operandos[i])."""

    index: int
    level: int
    scale: float
    passed: bool
    max_error: float
    scale_mismatch: Optional[ScaleMismatch] = None
    stages: List[StageCheck] = field(default_factory=list)

    @property
    def scale_reconciled(self) -> bool:
        return self.scale_mismatch is not None


@dataclass
class ValidationReport:
    """Relatório de uma execução completa da cadeia."""

    tolerance: float
    steps: List[StepReport] = field(default_factory=list)
    status: RunStatus = RunStatus.PASSED
    error: Optional[Exception] = None
    fatal_step: Optional[int] = None
    final_result: Optional[ValidationResult] = None
    final_cipher: Any = None
    expected: Optional[np.ndarray] = None

    @property
    def passed(self) -> bool:
        return self.status is RunStatus.PASSED

    @property
    def max_error(self) -> float:
        errors = [step.max_error for step in self.steps]
        if self.final_result is not None:
            errors.append(self.final_result.max_error)
        return max(errors) if errors else 0.0

    @property
    def violations(self) -> List[PrecisionViolation]:
        return [
            PrecisionViolation(step.index, step.max_error, self.tolerance)
            for step in self.steps
            if not step.passed
        ]

    def outcomes(self) -> List[bool]:
        """Aprovação de cada passo, em ordem."""
        return [step.passed for step in self.steps]

    def raise_for_status(self):
        """
        Levanta o erro fatal registrado ou a primeira violação de precisão.

        Raises:
            ChainExhausted, LevelMismatch: Se a execução foi interrompida
            PrecisionViolation: Se algum passo excedeu a tolerância
        """
        if self.error is not None:
            raise self.error

        violations = self.violations
        if violations:
            raise violations[0]

        if self.final_result is not None and not self.final_result.passed:
            raise PrecisionViolation(
                len(self.steps), self.final_result.max_error, self.tolerance
            )


def run_chain(
    operands: Sequence[Sequence[float]],
    encoder,
    encryptor,
    evaluator,
    decryptor,
    relin_keys,
    tolerance: float,
    nominal_scale: float,
    scale_rel_tolerance: float = 1e-12,
    trace_stages: bool = False,
    range_limit: float = None,
) -> ValidationReport:
    """
    Executa a cadeia de multiplicação e valida cada passo.

    Para cada operando i >= 1:
    1. codifica e criptografa o operando no topo da cadeia
    2. alinha o operando ao nível do acumulador
    3. reconcilia as escalas, se divergirem
    4. multiply_step(acumulador, operando)
    5. atualiza o produto de referência
    6. valida e registra o resultado, sem interromper em violações

    Args:
        operands: Vetores em ordem, todos do mesmo tamanho (pelo menos um)
        encoder: encode(values, scale) / decode(plaintext)
        encryptor: encrypt(plaintext)
        evaluator: multiply, relinearize, rescale_to_next, mod_switch_to
        decryptor: decrypt(ciphertext)
        relin_keys: Chaves de relinearização
        tolerance: Erro absoluto máximo aceito
        nominal_scale: Escala das criptografias novas
        scale_rel_tolerance: Tolerância relativa da comparação de escalas
        trace_stages: Se True, valida também cada etapa intermediária
        range_limit: Se informado, exige operandos em [-range_limit, range_limit]

    Returns:
        ValidationReport: Relatório por passo e status geral

    Raises:
        ValueError: Se os operandos forem vazios ou de tamanhos diferentes
    """
    operands = [make_operand(operand, range_limit) for operand in operands]
    if not operands:
        raise ValueError("A cadeia precisa de pelo menos um operando")

    length = operands[0].size
    if any(operand.size != length for operand in operands):
        raise ValueError(
            f"Operandos devem ter o mesmo tamanho: {[op.size for op in operands]}"
        )

    report = ValidationReport(tolerance=tolerance)

    def check(stages, stage, cipher, expected):
        result = validate(cipher, expected, tolerance, decryptor, encoder)
        stages.append(StageCheck(stage, result.passed, result.max_error))
        logger.debug("%s: max_error=%.6e", stage, result.max_error)

    accum_cipher = encryptor.encrypt(encoder.encode(operands[0], nominal_scale))
    accum_plain = operands[0]
    last_result = None

    for index in range(1, len(operands)):
        operand = operands[index]
        expected = elementwise_product(accum_plain, operand)
        stages = []

        def on_stage(stage, cipher):
            if trace_stages:
                check(stages, stage, cipher, expected)

        try:
            fresh = encryptor.encrypt(encoder.encode(operand, nominal_scale))
            if trace_stages:
                check(stages, STAGE_ENCRYPT, fresh, operand)

            aligned = align(fresh, accum_cipher.level, evaluator)
            if trace_stages and aligned is not fresh:
                check(stages, STAGE_MOD_SWITCH, aligned, operand)

            left, right, mismatch = reconcile_scale(
                accum_cipher, aligned, nominal_scale, scale_rel_tolerance
            )
            if trace_stages and left is not accum_cipher:
                check(stages, STAGE_SCALE_FIX, left, accum_plain)
            if trace_stages and right is not aligned:
                check(stages, STAGE_SCALE_FIX, right, operand)

            accum_cipher = multiply_step(
                left, right, relin_keys, evaluator, on_stage=on_stage
            )
        except (ChainExhausted, LevelMismatch) as exc:
            logger.error("Passo %d interrompido: %s", index, exc)
            report.status = RunStatus.FATAL
            report.error = exc
            report.fatal_step = index
            break

        accum_plain = expected
        last_result = validate(accum_cipher, accum_plain, tolerance, decryptor, encoder)
        step = StepReport(
            index=index,
            level=accum_cipher.level,
            scale=accum_cipher.scale,
            passed=last_result.passed,
            max_error=last_result.max_error,
            scale_mismatch=mismatch,
            stages=stages,
        )
        report.steps.append(step)

        if step.passed:
            logger.info(
                "Passo %d: nível %d, erro máximo %.6e", index, step.level, step.max_error
            )
        else:
            logger.warning("%s", PrecisionViolation(index, step.max_error, tolerance))

    report.final_cipher = accum_cipher
    report.expected = accum_plain

    if report.status is RunStatus.FATAL:
        return report

    if last_result is None:
        # Cadeia com um único operando: valida a criptografia inicial
        last_result = validate(accum_cipher, accum_plain, tolerance, decryptor, encoder)
    report.final_result = last_result

    if all(step.passed for step in report.steps) and last_result.passed:
        report.status = RunStatus.PASSED
    else:
        report.status = RunStatus.FAILED

    return report
