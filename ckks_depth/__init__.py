# Pacote de teste de profundidade multiplicativa CKKS

from .alignment import align, check_operand_scale, reconcile_scale
from .chain import RunStatus, StageCheck, StepReport, ValidationReport, run_chain
from .constants import CKKSChainParameters
from .errors import (
    ChainExhausted,
    CKKSDepthError,
    LevelMismatch,
    PrecisionViolation,
    ScaleMismatch,
)
from .multiply import multiply_step
from .reference import (
    elementwise_product,
    generate_random_data,
    make_operand,
    running_products,
)
from .validator import ValidationResult, validate

__all__ = [
    "CKKSChainParameters",
    "CKKSDepthError",
    "ChainExhausted",
    "LevelMismatch",
    "PrecisionViolation",
    "RunStatus",
    "ScaleMismatch",
    "StageCheck",
    "StepReport",
    "ValidationReport",
    "ValidationResult",
    "align",
    "check_operand_scale",
    "elementwise_product",
    "generate_random_data",
    "make_operand",
    "multiply_step",
    "reconcile_scale",
    "run_chain",
    "running_products",
    "validate",
]
