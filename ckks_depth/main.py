"""
Teste de profundidade multiplicativa CKKS pela linha de comando.

Calcula A * B * C * D (ou mais operandos) sobre dados aleatórios em
[-range_limit, range_limit] e valida cada passo contra o produto exato.

Exemplo:
    python -m ckks_depth --operands 4 --range-limit 10 --preset depth3
"""

import argparse
import logging
import sys

import numpy as np

from .chain import RunStatus
from .constants import CKKSChainParameters
from .diagnostics import (
    print_modulus_switching_chain,
    print_parameters,
    print_report,
    print_vector,
)
from .reference import generate_random_data
from .session import CKKSSession

logger = logging.getLogger(__name__)

EXIT_CODES = {
    RunStatus.PASSED: 0,
    RunStatus.FAILED: 1,
    RunStatus.FATAL: 2,
}


def args_parser(argv=None):
    """
    Lê os argumentos da linha de comando.

    Returns:
        argparse.Namespace: Argumentos do teste
    """
    parser = argparse.ArgumentParser(
        prog="ckks-depth",
        description="Teste de profundidade multiplicativa CKKS (A * B * C * D)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--operands", type=int, default=4, help="Número de operandos da cadeia"
    )
    parser.add_argument("--size", type=int, default=10, help="Tamanho de cada vetor")
    parser.add_argument(
        "--range-limit",
        type=float,
        default=10.0,
        help="Dados de entrada em [-range_limit, range_limit]",
    )
    parser.add_argument(
        "--preset",
        choices=["depth2", "depth3"],
        default="depth3",
        help="Configuração de parâmetros",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Erro máximo aceito (padrão: derivado dos parâmetros)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Semente dos dados")
    parser.add_argument(
        "--trace-stages",
        action="store_true",
        help="Valida cada etapa intermediária (multiply, relinearize, rescale)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log em nível DEBUG")

    args = parser.parse_args(argv)

    if args.operands < 1:
        parser.error("--operands deve ser pelo menos 1")
    if args.size < 1:
        parser.error("--size deve ser pelo menos 1")
    if args.range_limit <= 0:
        parser.error("--range-limit deve ser positivo")

    return args


def main(argv=None) -> int:
    args = args_parser(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    crypto_params = CKKSChainParameters.from_preset(args.preset)
    crypto_params.print_parameters_summary()
    rng = np.random.default_rng(args.seed)

    print(f"input data range [{-args.range_limit}, {args.range_limit}]")
    operands = [
        generate_random_data(args.size, -args.range_limit, args.range_limit, rng)
        for _ in range(args.operands)
    ]
    for index, operand in enumerate(operands):
        print(f"Input {index} vector size {operand.size}")
        print_vector(operand)

    with CKKSSession(crypto_params) as session:
        print_parameters(session.context)
        print_modulus_switching_chain(session.context)
        print(f"Encoder number of slots: {session.factory.slot_count}")

        report = session.run_chain(
            operands,
            tolerance=args.tolerance,
            trace_stages=args.trace_stages,
            range_limit=args.range_limit,
        )

    print_report(report)
    return EXIT_CODES[report.status]


if __name__ == "__main__":
    sys.exit(main())
