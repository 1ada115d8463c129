"""
Funções de diagnóstico para inspecionar parâmetros, cadeia de módulos,
plaintexts, ciphertexts e relatórios.
"""

import math

import numpy as np

from .chain import ValidationReport


def print_parameters(context):
    """Imprime os parâmetros do contexto e o suporte a key switching."""
    params = context.crypto_params
    print("=" * 50)
    print("| Encryption parameters")
    print("|   scheme: CKKS")
    print(f"|   poly_modulus_degree: {params.POLYNOMIAL_DEGREE}")
    print(
        f"|   coeff_modulus size: {params.total_coeff_modulus_bits} "
        f"({' + '.join(str(bits) for bits in params.COEFF_MODULUS_BITS)}) bits"
    )
    print(f"|   scale: 2^{params.scale_exp}")
    print(f"|   using_keyswitching: {context.using_keyswitching}")
    print("=" * 50)


def print_modulus_switching_chain(context):
    """Imprime a cadeia de módulos, do nível de chaves ao fundo."""
    print("Modulus switching chain:")
    for item in context.modulus_chain():
        label = "key level" if item["is_key_level"] else f"level {item['level']}"
        bits = item["coeff_modulus_bits"]
        print(
            f"  chain_index {item['chain_index']} ({label}): "
            f"{bits} = {sum(bits)} bits"
        )
    print(f"  max_level: {context.max_level}")


def print_plaintext_info(plain, context):
    """Imprime nível, escala e número de coeficientes de um plaintext."""
    print(f"    level: {context.level_of(plain.parms_id())}")
    print(f"    scale: 2^{math.log2(plain.scale):.6f}")
    print(f"    coeff_count: {plain.coeff_count()}")


def print_ciphertext_info(cipher):
    """Imprime nível, tamanho e escala de um ciphertext."""
    print(f"    level: {cipher.level} (restantes: {cipher.remaining_levels})")
    print(f"    size: {cipher.size}")
    print(f"    scale: 2^{math.log2(cipher.scale):.6f} ({cipher.scale:.6e})")


def print_vector(values, limit: int = 4, precision: int = 3):
    """Imprime as primeiras e as últimas posições de um vetor."""
    values = np.asarray(values, dtype=np.float64).ravel()
    fmt = f"{{:.{precision}f}}"

    if values.size <= 2 * limit:
        body = ", ".join(fmt.format(v) for v in values)
    else:
        head = ", ".join(fmt.format(v) for v in values[:limit])
        tail = ", ".join(fmt.format(v) for v in values[-limit:])
        body = f"{head}, ..., {tail}"
    print(f"    [ {body} ]")


def print_report(report: ValidationReport):
    """Imprime o relatório de uma execução da cadeia."""
    print("=== RELATÓRIO DA CADEIA ===")
    print(f"Status: {report.status.value}")
    print(f"Tolerância: {report.tolerance}")

    for step in report.steps:
        mark = "OK" if step.passed else "FALHOU"
        fix = " (escala corrigida)" if step.scale_reconciled else ""
        print(
            f"Passo {step.index}: nível {step.level}, "
            f"escala 2^{math.log2(step.scale):.6f}, "
            f"erro {step.max_error:.6e} [{mark}]{fix}"
        )
        for stage in step.stages:
            print(
                f"    {stage.stage:<12} erro {stage.max_error:.6e} "
                f"[{'OK' if stage.passed else 'FALHOU'}]"
            )

    if report.error is not None:
        print(f"Erro fatal no passo {report.fatal_step}: {report.error}")

    if report.expected is not None:
        print("Resultado esperado:")
        print_vector(report.expected)

    print(f"Erro máximo: {report.max_error:.6e}")
    print("=" * 35)
