import pytest

from ingate.cli import build_parser, main


@pytest.mark.parametrize("alias", ["version", "versions", "v"])
def test_version_output(alias, capsys):
    assert main([alias]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split(":")[0] for line in lines] == [
        "INGATE_VERSION",
        "GIT_COMMIT_ID",
        "PYTHON_VERSION",
    ]


@pytest.mark.parametrize("alias", ["start", "s"])
def test_start_aliases_parse(alias):
    args = build_parser().parse_args([alias, "-v", "2"])
    assert args.command == "start"
    assert args.verbosity == 2


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "InGate is a kubernetes controller" in capsys.readouterr().out


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        main(["bogus"])