"""
Sessão CKKS: contexto, chaves e operadores de uma execução da cadeia.

A sessão é criada uma vez, compartilhada apenas para leitura por todos os
componentes de uma execução e liberada ao final. Cadeias independentes
usam sessões independentes e podem rodar em paralelo.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from .chain import ValidationReport, run_chain
from .ciphertext_factory import CKKSCiphertextFactory
from .constants import CKKSChainParameters
from .context import CKKSContext
from .evaluator import CKKSEvaluator
from .key_factory import CKKSKeyFactory

logger = logging.getLogger(__name__)


class CKKSSession:
    """
    Dono único do contexto SEAL, das chaves e dos operadores de uma execução.

    Uso:
        with CKKSSession(CKKSChainParameters.depth3_config()) as session:
            report = session.run_chain([a, b, c, d])
    """

    def __init__(
        self,
        crypto_params: CKKSChainParameters = None,
        include_galois_keys: bool = False,
    ):
        """
        Cria o contexto, gera as chaves e instancia os operadores.

        Args:
            crypto_params: Parâmetros da cadeia (usa depth2_config se None)
            include_galois_keys: Se True, gera também as chaves de Galois
        """
        if crypto_params is None:
            crypto_params = CKKSChainParameters.depth2_config()

        self.crypto_params = crypto_params
        self.context = CKKSContext(crypto_params)
        self.key_factory = CKKSKeyFactory(self.context)
        self.keyset = self.key_factory.generate_full_keyset(
            include_galois_keys=include_galois_keys
        )
        self.factory = CKKSCiphertextFactory(self.context, self.keyset["secret_key"])
        self.evaluator = CKKSEvaluator(self.context)
        self._closed = False

        logger.info(
            "Sessão CKKS aberta: N=%d, max_level=%d",
            crypto_params.POLYNOMIAL_DEGREE,
            self.context.max_level,
        )

    @property
    def relin_keys(self):
        self._ensure_open()
        return self.keyset["relin_keys"]

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self):
        if self._closed:
            raise RuntimeError("Sessão CKKS já foi encerrada")

    def run_chain(
        self,
        operands: Sequence[Sequence[float]],
        tolerance: float = None,
        trace_stages: bool = False,
        range_limit: float = None,
    ) -> ValidationReport:
        """
        Executa a cadeia com os operadores desta sessão.

        Args:
            operands: Vetores em ordem
            tolerance: Erro máximo aceito (usa a tolerância derivada se None)
            trace_stages: Se True, valida cada etapa intermediária
            range_limit: Intervalo declarado dos operandos
        """
        self._ensure_open()

        if tolerance is None:
            tolerance = self.crypto_params.derive_tolerance()

        return run_chain(
            operands,
            encoder=self.factory,
            encryptor=self.factory,
            evaluator=self.evaluator,
            decryptor=self.factory,
            relin_keys=self.relin_keys,
            tolerance=tolerance,
            nominal_scale=self.crypto_params.SCALING_FACTOR,
            scale_rel_tolerance=self.crypto_params.SCALE_REL_TOLERANCE,
            trace_stages=trace_stages,
            range_limit=range_limit,
        )

    def close(self):
        """Libera contexto, chaves e operadores. Idempotente."""
        if self._closed:
            return

        self.factory = None
        self.evaluator = None
        self.keyset = None
        self.key_factory = None
        self.context = None
        self._closed = True
        logger.info("Sessão CKKS encerrada")

    def __enter__(self):
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


def _run_in_own_session(operands, crypto_params, tolerance, trace_stages):
    with CKKSSession(crypto_params) as session:
        return session.run_chain(operands, tolerance, trace_stages=trace_stages)


def run_independent_chains(
    operand_sets: Sequence[Sequence[Sequence[float]]],
    crypto_params: CKKSChainParameters = None,
    tolerance: float = None,
    max_workers: int = None,
    trace_stages: bool = False,
) -> List[ValidationReport]:
    """
    Executa cadeias independentes em paralelo, cada uma com sua sessão.

    Returns:
        List[ValidationReport]: Relatórios na mesma ordem de operand_sets
    """
    if crypto_params is None:
        crypto_params = CKKSChainParameters.depth2_config()

    with ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="ckks_chain"
    ) as executor:
        futures = [
            executor.submit(
                _run_in_own_session, operands, crypto_params, tolerance, trace_stages
            )
            for operands in operand_sets
        ]
        return [future.result() for future in futures]
