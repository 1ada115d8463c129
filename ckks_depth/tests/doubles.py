"""
Dublês em memória dos operadores CKKS para os testes da orquestração.

Modelam apenas a contabilidade do esquema: o ciphertext guarda o valor
já multiplicado pela escala real (payload) e a escala declarada, de modo
que a decodificação é payload / escala. Multiplicar multiplica payload e
escala; rescale divide ambos pelo primo descartado, que não é exatamente
2^40, reproduzindo a deriva de escala do SEAL.
"""

import numpy as np

from ckks_depth.errors import ChainExhausted, LevelMismatch

NOMINAL_SCALE = 2.0**40
SLOT_COUNT = 8


def primes_near(scale: float, count: int):
    """Primos fictícios próximos da escala nominal, ligeiramente diferentes."""
    return [scale * (1.0 - 1e-6 * (i + 1)) for i in range(count)]


class FakePlaintext:
    def __init__(self, payload, scale, level=0):
        self.payload = np.asarray(payload, dtype=np.float64)
        self.scale = scale
        self.level = level


class FakeCiphertext:
    def __init__(self, payload, scale, level, size, max_level):
        self.payload = np.asarray(payload, dtype=np.float64)
        self.scale = scale
        self.level = level
        self.size = size
        self.max_level = max_level

    @property
    def remaining_levels(self):
        return self.max_level - self.level

    def with_scale(self, scale):
        return FakeCiphertext(
            self.payload.copy(), scale, self.level, self.size, self.max_level
        )


class FakeFactory:
    """Encoder, encryptor e decryptor em um único objeto."""

    def __init__(self, max_level):
        self.max_level = max_level
        self.slot_count = SLOT_COUNT

    def encode(self, values, scale):
        values = np.asarray(values, dtype=np.float64)
        if values.size > self.slot_count:
            raise ValueError("Vetor excede o número de slots")
        padded = np.zeros(self.slot_count)
        padded[: values.size] = values
        return FakePlaintext(padded * scale, scale)

    def decode(self, plain):
        return plain.payload / plain.scale

    def encrypt(self, plain):
        return FakeCiphertext(
            plain.payload.copy(), plain.scale, plain.level, 2, self.max_level
        )

    def decrypt(self, cipher):
        return FakePlaintext(cipher.payload.copy(), cipher.scale, cipher.level)


class FakeEvaluator:
    """
    Avaliador que registra as chamadas recebidas.

    Args:
        primes: Um primo por nível de rescale (len(primes) = max_level)
        multiply_error: Erro absoluto somado ao valor a cada multiplicação
    """

    def __init__(self, primes, multiply_error=0.0):
        self.primes = list(primes)
        self.multiply_error = multiply_error
        self.calls = []

    @property
    def max_level(self):
        return len(self.primes)

    def multiply(self, ct1, ct2):
        self.calls.append("multiply")
        if ct1.level != ct2.level:
            raise LevelMismatch(ct1.level, ct2.level)
        scale = ct1.scale * ct2.scale
        payload = ct1.payload * ct2.payload + self.multiply_error * scale
        return FakeCiphertext(
            payload, scale, ct1.level, ct1.size + ct2.size - 1, self.max_level
        )

    def relinearize(self, ciphertext, relin_keys):
        self.calls.append("relinearize")
        if relin_keys is None:
            raise ValueError("Chaves de relinearização ausentes")
        if ciphertext.size != 3:
            raise ValueError("Relinearização requer 3 componentes")
        return FakeCiphertext(
            ciphertext.payload.copy(),
            ciphertext.scale,
            ciphertext.level,
            2,
            self.max_level,
        )

    def rescale_to_next(self, ciphertext):
        self.calls.append("rescale_to_next")
        if ciphertext.remaining_levels <= 0:
            raise ChainExhausted(ciphertext.level, self.max_level)
        prime = self.primes[ciphertext.level]
        return FakeCiphertext(
            ciphertext.payload / prime,
            ciphertext.scale / prime,
            ciphertext.level + 1,
            ciphertext.size,
            self.max_level,
        )

    def mod_switch_to(self, ciphertext, level):
        self.calls.append("mod_switch_to")
        if level > self.max_level:
            raise ChainExhausted(level, self.max_level)
        if level < ciphertext.level:
            raise LevelMismatch(ciphertext.level, level)
        return FakeCiphertext(
            ciphertext.payload.copy(),
            ciphertext.scale,
            level,
            ciphertext.size,
            self.max_level,
        )


class FakeBackend:
    """Conjunto de operadores em memória com max_level níveis de rescale."""

    RELIN_KEYS = object()

    def __init__(self, max_level=3, multiply_error=0.0, scale=NOMINAL_SCALE):
        self.scale = scale
        self.factory = FakeFactory(max_level)
        self.evaluator = FakeEvaluator(primes_near(scale, max_level), multiply_error)
        self.relin_keys = self.RELIN_KEYS

    def encrypt(self, values, level=0):
        cipher = self.factory.encrypt(self.factory.encode(values, self.scale))
        if level:
            cipher = self.evaluator.mod_switch_to(cipher, level)
        return cipher

    def decrypt(self, cipher, length):
        return self.factory.decode(self.factory.decrypt(cipher))[:length]

    def chain_kwargs(self, tolerance=0.5, **kwargs):
        """Argumentos de run_chain usando estes operadores."""
        result = {
            "encoder": self.factory,
            "encryptor": self.factory,
            "evaluator": self.evaluator,
            "decryptor": self.factory,
            "relin_keys": self.relin_keys,
            "tolerance": tolerance,
            "nominal_scale": self.scale,
        }
        result.update(kwargs)
        return result
