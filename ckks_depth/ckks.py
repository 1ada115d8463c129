"""
Classe para representar ciphertexts do esquema CKKS.

Esta classe encapsula um sealapi.Ciphertext junto com o contexto que o
criou, expondo os metadados usados pela política de profundidade: nível,
escala e tamanho. Operações de manutenção nunca alteram a instância
recebida; cada uma produz um novo CKKSCiphertext.
"""

import math
import os
import tempfile
import uuid

import tenseal.sealapi as sealapi

from .context import CKKSContext


def _seal_temp_path() -> str:
    """Caminho temporário para serialização do SEAL (/dev/shm quando possível)."""
    shm_dir = "/dev/shm"
    if os.path.isdir(shm_dir) and os.access(shm_dir, os.W_OK):
        return os.path.join(shm_dir, f"ckks_depth_{uuid.uuid4().hex}.bin")
    return os.path.join(tempfile.gettempdir(), f"ckks_depth_{uuid.uuid4().hex}.bin")


class CKKSCiphertext:
    """
    Classe que representa um ciphertext do esquema CKKS.

    Attributes:
        data: sealapi.Ciphertext subjacente
        context: Contexto CKKS ao qual o ciphertext pertence
    """

    def __init__(self, data, context: CKKSContext):
        """
        Inicializa um novo ciphertext CKKS.

        Args:
            data: sealapi.Ciphertext
            context: Contexto CKKS do ciphertext

        Raises:
            ValueError: Se os parâmetros estiverem inválidos
        """
        if data is None:
            raise ValueError("Ciphertext não pode ser None")

        if context is None:
            raise ValueError("Contexto não pode ser None")

        self.data = data
        self.context = context

        if self.size < 2:
            raise ValueError(
                f"Ciphertext deve ter pelo menos 2 componentes. Recebido: {self.size}"
            )

    @property
    def parms_id(self):
        return self.data.parms_id()

    @property
    def level(self) -> int:
        """Níveis consumidos desde a criptografia (0 = topo da cadeia)."""
        return self.context.level_of(self.data.parms_id())

    @property
    def remaining_levels(self) -> int:
        """Rescales ainda possíveis antes de esgotar a cadeia."""
        return self.context.max_level - self.level

    @property
    def scale(self) -> float:
        return self.data.scale

    @property
    def size(self) -> int:
        """Retorna o número de componentes do ciphertext."""
        return self.data.size()

    @property
    def coeff_modulus_size(self) -> int:
        return self.data.coeff_modulus_size()

    def is_fresh(self) -> bool:
        """
        Verifica se é um ciphertext recém-criptografado: topo da cadeia,
        2 componentes e escala nominal.
        """
        return (
            self.level == 0
            and self.size == 2
            and math.isclose(self.scale, self.context.nominal_scale, rel_tol=1e-12)
        )

    def copy(self) -> "CKKSCiphertext":
        """
        Cria uma cópia profunda do ciphertext.

        O sealapi não expõe construtor de cópia; a cópia passa por
        serialização em arquivo temporário.
        """
        fname = _seal_temp_path()
        try:
            self.data.save(fname)
            data = sealapi.Ciphertext()
            data.load(self.context.seal_context, fname)
        finally:
            if os.path.exists(fname):
                os.unlink(fname)
        return CKKSCiphertext(data, self.context)

    def with_scale(self, scale: float) -> "CKKSCiphertext":
        """
        Retorna uma cópia com a escala declarada substituída.

        Correção apenas de metadados: o conteúdo criptografado não muda.

        Args:
            scale: Nova escala declarada

        Raises:
            ValueError: Se a escala não for positiva
        """
        if not scale > 0:
            raise ValueError(f"Escala deve ser positiva: {scale}")

        result = self.copy()
        result.data.scale = float(scale)
        return result

    def print_summary(self):
        """Imprime um resumo do ciphertext."""
        print("=== RESUMO DO CIPHERTEXT CKKS ===")
        print(f"Número de componentes: {self.size}")
        print(f"Nível atual: {self.level} (de {self.context.max_level})")
        print(f"Níveis restantes: {self.remaining_levels}")
        print(f"Primos no módulo: {self.coeff_modulus_size}")
        print(f"Escala: 2^{math.log2(self.scale):.6f}")
        print(f"Status: {'Fresh' if self.is_fresh() else 'Processado'}")
        print("=" * 35)

    def __repr__(self):
        return (
            f"CKKSCiphertext(level={self.level}, size={self.size}, "
            f"scale=2^{math.log2(self.scale):.4f})"
        )
