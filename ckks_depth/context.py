"""
Contexto do esquema CKKS sobre o SEAL (via tenseal.sealapi).

O contexto valida os parâmetros e expõe a cadeia de módulos em termos de
níveis consumidos: nível 0 é o topo (ciphertext recém-criptografado) e o
nível max_level é o fundo da cadeia, onde não há mais rescale possível.
"""

import logging

import tenseal.sealapi as sealapi

from .constants import CKKSChainParameters

logger = logging.getLogger(__name__)

_SECURITY_LEVELS = {
    None: "NONE",
    128: "TC128",
    192: "TC192",
    256: "TC256",
}


class CKKSContext:
    """
    Encapsula um SEALContext CKKS validado.

    Attributes:
        crypto_params: Parâmetros da cadeia
        seal_context: sealapi.SEALContext subjacente
    """

    def __init__(self, crypto_params: CKKSChainParameters = None):
        """
        Cria o SEALContext a partir dos parâmetros.

        Args:
            crypto_params: Parâmetros da cadeia (usa depth2_config se None)

        Raises:
            ValueError: Se o SEAL rejeitar os parâmetros
        """
        if crypto_params is None:
            crypto_params = CKKSChainParameters.depth2_config()

        self.crypto_params = crypto_params

        parms = sealapi.EncryptionParameters(sealapi.SCHEME_TYPE.CKKS)
        parms.set_poly_modulus_degree(crypto_params.POLYNOMIAL_DEGREE)
        parms.set_coeff_modulus(
            sealapi.CoeffModulus.Create(
                crypto_params.POLYNOMIAL_DEGREE, crypto_params.COEFF_MODULUS_BITS
            )
        )

        sec_level = getattr(
            sealapi.SEC_LEVEL_TYPE, _SECURITY_LEVELS[crypto_params.SECURITY_LEVEL]
        )
        self.seal_context = sealapi.SEALContext(parms, True, sec_level)

        if not self.seal_context.parameters_set():
            raise ValueError(
                f"Parâmetros rejeitados pelo SEAL: {crypto_params!r}"
            )

        # Índice de cadeia do primeiro nível de dados (topo)
        self._top_chain_index = self.seal_context.first_context_data().chain_index()

        # parms_id de cada nível, do topo (0) ao fundo (max_level)
        self._parms_ids = []
        context_data = self.seal_context.first_context_data()
        while context_data is not None:
            self._parms_ids.append(context_data.parms_id())
            context_data = context_data.next_context_data()

        logger.debug(
            "Contexto CKKS criado: N=%d, coeff_modulus=%s, max_level=%d",
            crypto_params.POLYNOMIAL_DEGREE,
            crypto_params.COEFF_MODULUS_BITS,
            self.max_level,
        )

    @property
    def max_level(self) -> int:
        """Número de rescales suportados pela cadeia."""
        return self._top_chain_index

    @property
    def using_keyswitching(self) -> bool:
        return self.seal_context.using_keyswitching()

    @property
    def nominal_scale(self) -> float:
        return self.crypto_params.SCALING_FACTOR

    def chain_index_of(self, parms_id) -> int:
        """Retorna o índice de cadeia do SEAL para um parms_id."""
        context_data = self.seal_context.get_context_data(parms_id)
        if context_data is None:
            raise ValueError("parms_id não pertence a este contexto")
        return context_data.chain_index()

    def level_of(self, parms_id) -> int:
        """
        Converte um parms_id em nível consumido.

        Returns:
            int: 0 no topo da cadeia, max_level no fundo
        """
        return self._top_chain_index - self.chain_index_of(parms_id)

    def parms_id_at_level(self, level: int):
        """
        Retorna o parms_id de um nível da cadeia.

        Raises:
            ValueError: Se o nível estiver fora da cadeia
        """
        if level < 0 or level > self.max_level:
            raise ValueError(f"Nível deve estar entre 0 e {self.max_level}: {level}")
        return self._parms_ids[level]

    def coeff_modulus_bits_at(self, level: int):
        """Tamanhos em bits dos primos ainda presentes no nível."""
        context_data = self.seal_context.get_context_data(self.parms_id_at_level(level))
        return [modulus.bit_count() for modulus in context_data.parms().coeff_modulus()]

    def modulus_chain(self):
        """
        Descreve a cadeia de módulos, incluindo o nível de chaves.

        Returns:
            List[Dict]: Um item por nível do SEAL, do nível de chaves ao fundo
        """
        chain = []
        context_data = self.seal_context.key_context_data()
        while context_data is not None:
            chain_index = context_data.chain_index()
            chain.append(
                {
                    "chain_index": chain_index,
                    "level": self._top_chain_index - chain_index,
                    "is_key_level": chain_index > self._top_chain_index,
                    "coeff_modulus_bits": [
                        modulus.bit_count()
                        for modulus in context_data.parms().coeff_modulus()
                    ],
                }
            )
            context_data = context_data.next_context_data()
        return chain
