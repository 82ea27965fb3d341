import pytest

from edmacros import main as main_module


def test_main_dispatches_to_cli(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(main_module, "run_cli", lambda argv: calls.append(list(argv)) or 0)

    main_module.main(["list"])

    assert calls == [["list"]]


def test_main_exits_with_cli_status(monkeypatch) -> None:
    monkeypatch.setattr(main_module, "run_cli", lambda argv: 1)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "x"])
    assert excinfo.value.code == 1


def test_main_rejects_unknown_command() -> None:
    with pytest.raises(SystemExit):
        main_module.main(["--shell"])
