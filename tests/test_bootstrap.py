import asyncio
import json
import sys

import httpx
import pytest

from pineconekit.bootstrap import AppOptions, install_error_handlers, main, parse_args, run_app, validate_env
from pineconekit.errors import ConfigurationError, ErrorCode, UncaughtError
from pineconekit.pineconeclient import PineconeClient

ENV = {"PINECONE_KEY": "test-key", "PINECONE_ENV": "test-env"}


@pytest.fixture
def factory(fake):
    def _factory(settings):
        return PineconeClient(settings, transport=httpx.ASGITransport(app=fake.app))
    return _factory


def test_validate_env_lists_every_missing_name():
    assert validate_env(["A"], {"A": "1", "B": ""}) == {"A": "1"}

    with pytest.raises(ConfigurationError) as ei:
        validate_env(["A", "B", "C"], {"A": "1", "B": "  "})

    assert ei.value.code is ErrorCode.CONFIGURATION_MISSING
    assert "B, C" in str(ei.value)


def test_excepthook_routes_to_handler_and_restores(monkeypatch):
    passed = []
    monkeypatch.setattr(sys, "excepthook", lambda *a: passed.append(a[0]))
    errors = []

    restore = install_error_handlers(errors.append)
    exc = ValueError("boom")
    sys.excepthook(ValueError, exc, None)
    sys.excepthook(KeyboardInterrupt, KeyboardInterrupt(), None)
    restore()

    assert len(errors) == 1
    assert isinstance(errors[0], UncaughtError)
    assert errors[0].code is ErrorCode.UNCAUGHT_EXCEPTION
    assert errors[0].cause is exc
    assert passed == [KeyboardInterrupt]


def test_loop_exception_handler_reports_unhandled_task_errors():
    loop = asyncio.new_event_loop()
    try:
        errors = []
        restore = install_error_handlers(errors.append, loop)
        exc = RuntimeError("task died")
        loop.call_exception_handler({"message": "Task exception was never retrieved", "exception": exc})
        restore()

        assert errors[0].code is ErrorCode.UNHANDLED_REJECTION
        assert "task died" in errors[0].message
        assert loop.get_exception_handler() is None
    finally:
        loop.close()


@pytest.mark.anyio
async def test_run_app_initializes_client_and_returns_main_result(fake, settings, factory):
    fake.add_index("docs")

    async def app_main(client):
        return {"project": client.project, "indexes": await client.list_indexes()}

    out = await run_app(AppOptions(name="t"), app_main, settings, client_factory=factory, environ=ENV)

    assert out == {"project": "proj1", "indexes": ["docs"]}


@pytest.mark.anyio
async def test_run_app_fails_fast_on_missing_env(settings):
    built = []

    async def app_main(client):
        return None

    with pytest.raises(ConfigurationError):
        await run_app(
            AppOptions(name="t"),
            app_main,
            settings.model_copy(update={"PINECONE_ENV": None}),
            client_factory=lambda s: built.append(s),
            environ={"PINECONE_KEY": "k"},
        )
    assert built == []


def test_parse_args_create():
    args = parse_args(["--debug", "create", "docs", "--dimension", "8", "--metric", "euclidean", "--no-wait"])
    assert args.debug is True
    assert (args.command, args.name, args.dimension, args.metric, args.no_wait) == ("create", "docs", 8, "euclidean", True)


def test_cli_list_prints_json(monkeypatch, capsys, fake, settings, factory):
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)
    fake.add_index("docs")

    code = main(["list"], settings=settings, client_factory=factory)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == ["docs"]


def test_cli_create_without_wait(monkeypatch, capsys, fake, settings, factory):
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)

    code = main(["create", "fresh", "--no-wait"], settings=settings, client_factory=factory)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"index": "fresh", "created": True, "ready": False}
    assert fake.indexes["fresh"]["database"]["dimension"] == 3


def test_cli_reports_errors_with_exit_code(monkeypatch, capsys, settings, factory):
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)

    code = main(["delete", "ghost"], settings=settings, client_factory=factory)

    assert code == 1
    payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert payload["code"] == "INDEX_NOT_FOUND"


def test_cli_missing_env_exits_nonzero(monkeypatch, capsys, settings, factory):
    monkeypatch.delenv("PINECONE_KEY", raising=False)
    monkeypatch.setenv("PINECONE_ENV", "test-env")

    no_key = settings.model_copy(update={"PINECONE_KEY": None})
    assert main(["list"], settings=no_key, client_factory=factory) == 1
    assert "PINECONE_KEY" in capsys.readouterr().err


def test_cli_reads_credentials_from_dotenv(monkeypatch, tmp_path, capsys, fake, factory):
    monkeypatch.delenv("PINECONE_KEY", raising=False)
    monkeypatch.delenv("PINECONE_ENV", raising=False)
    (tmp_path / ".env").write_text("PINECONE_KEY=test-key\nPINECONE_ENV=test-env\n")
    monkeypatch.chdir(tmp_path)
    fake.add_index("docs")

    code = main(["list"], client_factory=factory)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == ["docs"]


@pytest.mark.anyio
async def test_run_app_accepts_names_set_only_in_settings(fake, settings, factory):
    async def app_main(client):
        return client.project

    out = await run_app(AppOptions(name="t"), app_main, settings, client_factory=factory, environ={})

    assert out == "proj1"
