"""
Parâmetros centralizados para o teste de profundidade multiplicativa CKKS.

Esta classe organiza os parâmetros do esquema de forma semântica para
facilitar a configuração do contexto SEAL.

Configuração de referência do teste A * B * C * D:
- poly_modulus_degree = 8192
- coeff_modulus = {60, 40, 40, 60} (máximo 218 bits para N = 8192)
- scale = 2^40
- precisão antes do ponto: 60 - 40 = 20 bits
- precisão depois do ponto: 40 - 20 = 20 bits

Na cadeia do SEAL o último primo é o primo especial usado apenas para
key switching; os demais formam os níveis de dados. Cada rescale consome
exatamente um primo, portanto a profundidade máxima é len(coeff_modulus) - 2.
"""

# Bits máximos do coeff_modulus para segurança de 128 bits (HomomorphicEncryption.org)
MAX_COEFF_MODULUS_BITS_128 = {
    1024: 27,
    2048: 54,
    4096: 109,
    8192: 218,
    16384: 438,
    32768: 881,
}

SECURITY_LEVELS = (None, 128, 192, 256)


class CKKSChainParameters:
    """
    Classe que centraliza os parâmetros do esquema CKKS para cadeias de
    multiplicação.

    Separa:
    - Parâmetros estruturais (grau do polinômio, cadeia de módulos)
    - Parâmetros de escala e precisão
    - Tolerâncias usadas nas comparações aproximadas
    """

    def __init__(
        self,
        poly_modulus_degree: int = 8192,  # N - grau do polinômio
        coeff_modulus_bits=(60, 40, 40, 60),  # tamanhos em bits dos primos
        scale_exp: int = 40,  # log2(Δ) - escala nominal Δ = 2^scale_exp
        scale_rel_tolerance: float = 1e-12,  # tolerância relativa entre escalas
        security_level: int = 128,  # nível de segurança exigido pelo SEAL
    ):
        """
        Inicializa os parâmetros da cadeia CKKS.

        Args:
            poly_modulus_degree: N, potência de dois
            coeff_modulus_bits: tamanhos em bits dos primos do coeff_modulus,
                do primeiro (nível de topo) ao primo especial
            scale_exp: expoente da escala nominal (Δ = 2^scale_exp)
            scale_rel_tolerance: diferença relativa máxima aceita entre escalas
            security_level: 128, 192, 256 ou None (sem verificação de segurança)

        Raises:
            ValueError: Se os parâmetros estiverem inválidos
        """
        # === PARÂMETROS ESTRUTURAIS ===
        self.POLYNOMIAL_DEGREE = int(poly_modulus_degree)
        self.COEFF_MODULUS_BITS = [int(bits) for bits in coeff_modulus_bits]

        # === PARÂMETROS DE ESCALA ===
        self.scale_exp = int(scale_exp)
        self.SCALING_FACTOR = float(2.0**self.scale_exp)  # Δ
        self.SCALE_REL_TOLERANCE = float(scale_rel_tolerance)

        # === SEGURANÇA ===
        self.SECURITY_LEVEL = security_level

        self.validate_parameters()

    # === VALIDAÇÃO ===
    def validate_parameters(self):
        """
        Valida a consistência dos parâmetros.

        Raises:
            ValueError: Se algum parâmetro for inconsistente
        """
        n = self.POLYNOMIAL_DEGREE
        if n < 2 or n & (n - 1) != 0:
            raise ValueError(f"poly_modulus_degree deve ser potência de dois: {n}")

        if len(self.COEFF_MODULUS_BITS) < 3:
            raise ValueError(
                "coeff_modulus precisa de pelo menos 3 primos "
                "(topo, um nível de rescale e o primo especial)"
            )

        if any(bits <= 0 or bits > 60 for bits in self.COEFF_MODULUS_BITS):
            raise ValueError(
                f"Tamanhos dos primos devem estar entre 1 e 60 bits: "
                f"{self.COEFF_MODULUS_BITS}"
            )

        if self.scale_exp <= 0 or self.scale_exp >= self.COEFF_MODULUS_BITS[0]:
            raise ValueError(
                f"Escala 2^{self.scale_exp} não cabe no primeiro primo "
                f"({self.COEFF_MODULUS_BITS[0]} bits)"
            )

        if self.SCALE_REL_TOLERANCE < 0:
            raise ValueError("scale_rel_tolerance não pode ser negativa")

        if self.SECURITY_LEVEL not in SECURITY_LEVELS:
            raise ValueError(
                f"security_level deve ser um de {SECURITY_LEVELS}: {self.SECURITY_LEVEL}"
            )

        if self.SECURITY_LEVEL == 128:
            max_bits = MAX_COEFF_MODULUS_BITS_128.get(n)
            if max_bits is not None and self.total_coeff_modulus_bits > max_bits:
                raise ValueError(
                    f"coeff_modulus com {self.total_coeff_modulus_bits} bits excede "
                    f"o máximo de {max_bits} bits para N = {n}"
                )

    # === PROPRIEDADES DERIVADAS ===
    @property
    def max_level(self) -> int:
        """Número de multiplicações com rescale suportadas pela cadeia."""
        return len(self.COEFF_MODULUS_BITS) - 2

    @property
    def slot_count(self) -> int:
        """Slots disponíveis no encoder (N/2)."""
        return self.POLYNOMIAL_DEGREE // 2

    @property
    def total_coeff_modulus_bits(self) -> int:
        return sum(self.COEFF_MODULUS_BITS)

    @property
    def integer_bits(self) -> int:
        """Precisão antes do ponto: bits do primeiro primo menos bits da escala."""
        return self.COEFF_MODULUS_BITS[0] - self.scale_exp

    @property
    def fractional_bits(self) -> int:
        """Precisão depois do ponto: bits da escala menos a precisão inteira."""
        return self.scale_exp - self.integer_bits

    def derive_tolerance(self) -> float:
        """
        Deriva a tolerância de validação a partir do orçamento de bits.

        Para 20 bits inteiros e 20 bits fracionários a tolerância é meia
        unidade (0.5).

        Returns:
            float: 2^(integer_bits - fractional_bits - 1)
        """
        return float(2.0 ** (self.integer_bits - self.fractional_bits - 1))

    # === CONFIGURAÇÕES PRONTAS ===
    @classmethod
    def depth2_config(cls):
        """
        Configuração de referência: N = 8192, {60, 40, 40, 60}, escala 2^40.

        Returns:
            CKKSChainParameters: Parâmetros com 2 níveis de rescale
        """
        return cls(
            poly_modulus_degree=8192, coeff_modulus_bits=(60, 40, 40, 60), scale_exp=40
        )

    @classmethod
    def depth3_config(cls):
        """
        Configuração com profundidade suficiente para A * B * C * D com rescale
        após cada multiplicação: N = 16384, {60, 40, 40, 40, 60}, escala 2^40.

        Returns:
            CKKSChainParameters: Parâmetros com 3 níveis de rescale
        """
        return cls(
            poly_modulus_degree=16384,
            coeff_modulus_bits=(60, 40, 40, 40, 60),
            scale_exp=40,
        )

    @classmethod
    def from_preset(cls, name: str):
        """Retorna a configuração pelo nome ("depth2" ou "depth3")."""
        presets = {"depth2": cls.depth2_config, "depth3": cls.depth3_config}
        if name not in presets:
            raise ValueError(
                f"Configuração desconhecida: {name}. Opções: {sorted(presets)}"
            )
        return presets[name]()

    def __eq__(self, other):
        if not isinstance(other, CKKSChainParameters):
            return NotImplemented
        return (
            self.POLYNOMIAL_DEGREE == other.POLYNOMIAL_DEGREE
            and self.COEFF_MODULUS_BITS == other.COEFF_MODULUS_BITS
            and self.scale_exp == other.scale_exp
            and self.SCALE_REL_TOLERANCE == other.SCALE_REL_TOLERANCE
            and self.SECURITY_LEVEL == other.SECURITY_LEVEL
        )

    def __hash__(self):
        return hash(
            (
                self.POLYNOMIAL_DEGREE,
                tuple(self.COEFF_MODULUS_BITS),
                self.scale_exp,
                self.SCALE_REL_TOLERANCE,
                self.SECURITY_LEVEL,
            )
        )

    def __repr__(self):
        return (
            f"CKKSChainParameters(poly_modulus_degree={self.POLYNOMIAL_DEGREE}, "
            f"coeff_modulus_bits={self.COEFF_MODULUS_BITS}, scale_exp={self.scale_exp})"
        )

    def print_parameters_summary(self):
        """
        Imprime um resumo dos parâmetros configurados.
        """
        print("=== PARÂMETROS DA CADEIA CKKS ===")
        print(f"poly_modulus_degree: {self.POLYNOMIAL_DEGREE}")
        print(
            f"coeff_modulus: {self.COEFF_MODULUS_BITS} "
            f"({self.total_coeff_modulus_bits} bits)"
        )
        print(f"Escala nominal: 2^{self.scale_exp}")
        print(f"Profundidade máxima: {self.max_level} multiplicações")
        print(f"Precisão antes do ponto: {self.integer_bits} bits")
        print(f"Precisão depois do ponto: {self.fractional_bits} bits")
        print(f"Tolerância derivada: {self.derive_tolerance()}")
        print(f"Slots disponíveis: {self.slot_count} (N/2)")
        print("=" * 50)
