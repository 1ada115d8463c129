import pytest

from ckks_depth.chain import RunStatus
from ckks_depth.main import EXIT_CODES, args_parser, main


class TestArgsParser:
    """Testes para os argumentos da linha de comando"""

    def test_defaults(self):
        """Teste para verificar os valores padrão"""
        args = args_parser([])

        assert args.operands == 4
        assert args.size == 10
        assert args.range_limit == 10.0
        assert args.preset == "depth3"
        assert args.tolerance is None
        assert args.seed is None
        assert not args.trace_stages
        assert not args.verbose

    def test_custom_values(self):
        args = args_parser(
            ["--operands", "3", "--preset", "depth2", "--tolerance", "0.25", "--seed", "7"]
        )

        assert args.operands == 3
        assert args.preset == "depth2"
        assert args.tolerance == 0.25
        assert args.seed == 7

    @pytest.mark.parametrize(
        "argv",
        [
            ["--operands", "0"],
            ["--size", "0"],
            ["--range-limit", "-1"],
            ["--preset", "depth9"],
        ],
    )
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit):
            args_parser(argv)

    def test_exit_codes(self):
        assert EXIT_CODES[RunStatus.PASSED] == 0
        assert EXIT_CODES[RunStatus.FAILED] == 1
        assert EXIT_CODES[RunStatus.FATAL] == 2


class TestMain:
    """Testes de ponta a ponta da linha de comando"""

    def test_depth3_passes(self, capsys):
        code = main(["--operands", "4", "--size", "4", "--seed", "1"])

        out = capsys.readouterr().out
        assert code == 0
        assert "PARÂMETROS DA CADEIA CKKS" in out
        assert "Status: passed" in out

    def test_depth2_exhausts_chain(self, capsys):
        code = main(["--operands", "4", "--size", "4", "--seed", "1", "--preset", "depth2"])

        assert code == 2
        assert "Erro fatal no passo 3" in capsys.readouterr().out
