"""
Avaliador homomórfico CKKS sobre o Evaluator do SEAL.

Cada operação recebe ciphertexts e devolve um novo CKKSCiphertext; as
entradas nunca são modificadas. Assim os invariantes de nível, escala e
tamanho podem ser verificados entre uma etapa e outra.
"""

import logging

import tenseal.sealapi as sealapi

from .ckks import CKKSCiphertext
from .context import CKKSContext
from .errors import ChainExhausted, LevelMismatch

logger = logging.getLogger(__name__)


class CKKSEvaluator:
    """
    Operações homomórficas usadas pela cadeia de multiplicação:
    multiply, relinearize, rescale_to_next e mod_switch_to.
    """

    def __init__(self, context: CKKSContext):
        if context is None:
            raise ValueError("Contexto não pode ser None")

        self.context = context
        self._evaluator = sealapi.Evaluator(context.seal_context)

    @property
    def max_level(self) -> int:
        return self.context.max_level

    def _new_ciphertext(self):
        return sealapi.Ciphertext(self.context.seal_context)

    def multiply(self, ct1: CKKSCiphertext, ct2: CKKSCiphertext) -> CKKSCiphertext:
        """
        Multiplicação raw: (b1, a1) * (b2, a2) = (d0, d1, d2).

        A escala do resultado é o produto das escalas de entrada.

        Raises:
            LevelMismatch: Se os ciphertexts estiverem em níveis diferentes
        """
        if ct1.level != ct2.level:
            raise LevelMismatch(ct1.level, ct2.level)

        result = self._new_ciphertext()
        self._evaluator.multiply(ct1.data, ct2.data, result)
        return CKKSCiphertext(result, self.context)

    def relinearize(self, ciphertext: CKKSCiphertext, relin_keys) -> CKKSCiphertext:
        """
        Relineariza um ciphertext de 3 componentes para 2 componentes.

        A relinearização preserva nível, escala e valor.

        Raises:
            ValueError: Se o ciphertext não tiver exatamente 3 componentes
        """
        if ciphertext.size != 3:
            raise ValueError(
                f"Relinearização requer ciphertext com exatamente 3 componentes. "
                f"Recebido: {ciphertext.size} componentes"
            )

        result = self._new_ciphertext()
        self._evaluator.relinearize(ciphertext.data, relin_keys, result)
        return CKKSCiphertext(result, self.context)

    def rescale_to_next(self, ciphertext: CKKSCiphertext) -> CKKSCiphertext:
        """
        Rescale para o próximo primo da cadeia: divide a escala pelo primo
        descartado e avança um nível.

        Raises:
            ChainExhausted: Se não houver mais níveis para rescalonar
        """
        if ciphertext.remaining_levels <= 0:
            raise ChainExhausted(ciphertext.level, self.max_level)

        result = self._new_ciphertext()
        self._evaluator.rescale_to_next(ciphertext.data, result)
        return CKKSCiphertext(result, self.context)

    def mod_switch_to(self, ciphertext: CKKSCiphertext, level: int) -> CKKSCiphertext:
        """
        Desce o ciphertext até o nível indicado sem rescale.

        A troca de módulo é exata e irreversível: não altera o valor nem a
        escala, apenas descarta primos.

        Raises:
            ChainExhausted: Se o nível estiver além do fundo da cadeia
            LevelMismatch: Se o nível alvo estiver acima do nível atual
        """
        if level > self.max_level:
            raise ChainExhausted(level, self.max_level)

        if level < ciphertext.level:
            raise LevelMismatch(
                ciphertext.level,
                level,
                f"Troca de módulo não pode subir de nível: "
                f"{ciphertext.level} -> {level}",
            )

        result = self._new_ciphertext()
        self._evaluator.mod_switch_to(
            ciphertext.data, self.context.parms_id_at_level(level), result
        )
        return CKKSCiphertext(result, self.context)
