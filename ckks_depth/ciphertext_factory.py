"""
Fábrica para codificação, criptografia e decriptografia no esquema CKKS.

Esta classe fornece uma interface de alto nível sobre o CKKSEncoder, o
Encryptor e o Decryptor do SEAL. A mesma instância cumpre os papéis de
encoder, encryptor e decryptor esperados pela cadeia de multiplicação.
"""

import logging
from typing import Sequence

import numpy as np
import tenseal.sealapi as sealapi

from .ckks import CKKSCiphertext
from .context import CKKSContext

logger = logging.getLogger(__name__)


class CKKSCiphertextFactory:
    """
    Fábrica para criação e manipulação de ciphertexts CKKS.

    A criptografia é simétrica (chave secreta), como no teste de
    profundidade multiplicativa.
    """

    def __init__(self, context: CKKSContext, secret_key):
        """
        Inicializa a fábrica com o contexto e a chave secreta.

        Args:
            context: Contexto CKKS
            secret_key: sealapi.SecretKey usada para criptografar e decriptografar
        """
        if context is None:
            raise ValueError("Contexto não pode ser None")

        self.context = context
        self.encoder = sealapi.CKKSEncoder(context.seal_context)
        self.encryptor = sealapi.Encryptor(context.seal_context, secret_key)
        self.decryptor = sealapi.Decryptor(context.seal_context, secret_key)

    @property
    def slot_count(self) -> int:
        return self.encoder.slot_count()

    def encode(self, values: Sequence[float], scale: float = None):
        """
        Codifica um vetor real em um plaintext.

        Args:
            values: Vetor real (no máximo slot_count elementos)
            scale: Escala da codificação (usa a escala nominal se None)

        Returns:
            sealapi.Plaintext: Plaintext codificado no topo da cadeia

        Raises:
            ValueError: Se o vetor for vazio ou maior que o número de slots
        """
        if scale is None:
            scale = self.context.nominal_scale

        values = [float(v) for v in np.asarray(values, dtype=np.float64).ravel()]
        if not values:
            raise ValueError("Vetor a codificar não pode ser vazio")

        if len(values) > self.slot_count:
            raise ValueError(
                f"Vetor com {len(values)} elementos excede {self.slot_count} slots"
            )

        plain = sealapi.Plaintext()
        self.encoder.encode(values, float(scale), plain)
        return plain

    def decode(self, plain) -> np.ndarray:
        """
        Decodifica um plaintext em vetor real.

        Returns:
            np.ndarray: Vetor com slot_count elementos
        """
        return np.asarray(self.encoder.decode_double(plain), dtype=np.float64)

    def encrypt(self, plain) -> CKKSCiphertext:
        """
        Criptografa um plaintext com a chave secreta.

        Returns:
            CKKSCiphertext: Ciphertext de 2 componentes no nível do plaintext
        """
        ciphertext = sealapi.Ciphertext(self.context.seal_context)
        self.encryptor.encrypt_symmetric(plain, ciphertext)
        return CKKSCiphertext(ciphertext, self.context)

    def decrypt(self, ciphertext: CKKSCiphertext):
        """
        Decriptografa um ciphertext (aceita tamanho 2 ou 3).

        Returns:
            sealapi.Plaintext: Plaintext com a escala do ciphertext
        """
        plain = sealapi.Plaintext()
        self.decryptor.decrypt(ciphertext.data, plain)
        return plain

    def encode_and_encrypt(
        self, values: Sequence[float], scale: float = None
    ) -> CKKSCiphertext:
        """Codifica e criptografa um vetor real no topo da cadeia."""
        return self.encrypt(self.encode(values, scale))

    def decrypt_and_decode(self, ciphertext: CKKSCiphertext, length: int = None):
        """
        Decriptografa e decodifica, opcionalmente truncando o resultado.

        Args:
            ciphertext: Ciphertext CKKS
            length: Número de elementos a retornar (todos os slots se None)
        """
        decoded = self.decode(self.decrypt(ciphertext))
        if length is not None:
            decoded = decoded[:length]
        return decoded


# Função de conveniência para criar instância da fábrica
def create_ckks_factory(context: CKKSContext, secret_key) -> CKKSCiphertextFactory:
    """
    Cria uma nova instância da fábrica de ciphertexts CKKS.

    Args:
        context: Contexto CKKS
        secret_key: Chave secreta

    Returns:
        CKKSCiphertextFactory: Nova instância da fábrica
    """
    return CKKSCiphertextFactory(context, secret_key)
