"""
Fábrica para geração das chaves CKKS usadas numa cadeia de multiplicação.

As chaves são geradas uma única vez por contexto e compartilhadas apenas
para leitura por todos os passos da cadeia.
"""

import logging
from typing import Any, Dict

import tenseal.sealapi as sealapi

from .context import CKKSContext

logger = logging.getLogger(__name__)


class CKKSKeyFactory:
    """
    Fábrica para geração e gerenciamento de chaves CKKS.

    KeyGen:
    - sk: chave secreta, usada para criptografia simétrica e decriptografia
    - pk: chave pública (opcional, a cadeia usa criptografia simétrica)
    - rlk: chaves de relinearização, exigidas após cada multiplicação
    - gk: chaves de Galois (opcionais, para rotações)
    """

    def __init__(self, context: CKKSContext = None):
        """
        Inicializa a fábrica de chaves com um contexto.

        Args:
            context: Contexto CKKS (cria um com parâmetros padrão se None)
        """
        if context is None:
            context = CKKSContext()

        self.context = context
        self._keygen = sealapi.KeyGenerator(context.seal_context)

    def generate_secret_key(self):
        """
        Retorna a chave secreta do gerador.

        Returns:
            sealapi.SecretKey: Chave secreta sk
        """
        return self._keygen.secret_key()

    def generate_public_key(self):
        """
        Gera uma chave pública a partir da chave secreta do gerador.

        Returns:
            sealapi.PublicKey: Chave pública pk
        """
        public_key = sealapi.PublicKey()
        self._keygen.create_public_key(public_key)
        return public_key

    def generate_relin_keys(self):
        """
        Gera as chaves de relinearização.

        Raises:
            ValueError: Se o contexto não suportar key switching

        Returns:
            sealapi.RelinKeys: Chaves de relinearização rlk
        """
        if not self.context.using_keyswitching:
            raise ValueError(
                "Contexto não suporta key switching: relinearização indisponível"
            )
        relin_keys = sealapi.RelinKeys()
        self._keygen.create_relin_keys(relin_keys)
        return relin_keys

    def generate_galois_keys(self):
        """
        Gera as chaves de Galois (rotações).

        Returns:
            sealapi.GaloisKeys: Chaves de Galois gk
        """
        galois_keys = sealapi.GaloisKeys()
        self._keygen.create_galois_keys(galois_keys)
        return galois_keys

    def generate_full_keyset(
        self, include_public_key: bool = False, include_galois_keys: bool = False
    ) -> Dict[str, Any]:
        """
        Gera o conjunto de chaves para uma cadeia de multiplicação.

        Args:
            include_public_key: Se True, inclui a chave pública
            include_galois_keys: Se True, inclui as chaves de Galois

        Returns:
            Dict: Dicionário contendo as chaves:
                - 'secret_key'
                - 'relin_keys'
                - 'public_key' (opcional)
                - 'galois_keys' (opcional)
        """
        keyset = {
            "secret_key": self.generate_secret_key(),
            "relin_keys": self.generate_relin_keys(),
        }
        if include_public_key:
            keyset["public_key"] = self.generate_public_key()
        if include_galois_keys:
            keyset["galois_keys"] = self.generate_galois_keys()

        logger.debug("Chaves geradas: %s", sorted(keyset))
        return keyset

    def key_parms_ids(self, keyset: Dict[str, Any]) -> Dict[str, Any]:
        """
        Retorna o parms_id de cada chave do conjunto.

        Todas as chaves devem estar associadas ao nível de chaves do contexto.
        """
        return {name: key.parms_id() for name, key in keyset.items()}


# Função de conveniência para criar instância da fábrica de chaves
def create_key_factory(context: CKKSContext = None) -> CKKSKeyFactory:
    """
    Cria uma nova instância da fábrica de chaves CKKS.

    Args:
        context: Contexto CKKS (usa parâmetros padrão se None)

    Returns:
        CKKSKeyFactory: Nova instância da fábrica de chaves
    """
    return CKKSKeyFactory(context)
