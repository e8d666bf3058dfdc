"""
Tests for the command-line interface.

Prompts are replaced with scripted answers and the manager runs over
in-memory stores, except where --home points at a temporary directory.
"""

import base58
import pytest

import app
from conftest import PHRASE_12, PHRASE_12_B
from wallet import verify, wallet_from_mnemonic

PASSWORD = "password123"


@pytest.fixture
def answers(monkeypatch):
    """Queue of answers for secret and plain prompts."""
    queue = []

    def answer(text, default=None):
        return queue.pop(0)

    monkeypatch.setattr(app, "_prompt_secret", answer)
    monkeypatch.setattr(app, "_prompt", answer)
    return queue


@pytest.fixture
def run(manager):
    def run(*argv):
        return app.main(list(argv), manager=manager)
    return run


class TestNew:

    def test_new_prints_phrase_and_address(self, run, answers, manager, capsys):
        answers.extend([PASSWORD, PASSWORD])
        assert run("new", "-n", "main") == 0

        out = capsys.readouterr().out
        record = manager.get_wallet("main")
        assert record.address in out
        assert "RECOVERY PHRASE" in out
        assert manager.get_active_wallet().name == "main"

    def test_new_12_words_on_devnet(self, run, answers, manager, capsys):
        answers.extend([PASSWORD, PASSWORD])
        assert run("new", "-n", "dev", "--words", "12", "--network", "devnet") == 0

        out = capsys.readouterr().out
        phrase_line = next(line for line in out.splitlines() if line.startswith("  ") and ":" not in line)
        assert len(phrase_line.split()) == 12
        assert manager.get_wallet("dev").network == "devnet"

    def test_short_password_rejected(self, run, answers, manager, capsys):
        answers.extend(["short", "short"])
        assert run("new", "-n", "main") == 1
        assert "at least 8" in capsys.readouterr().err
        assert manager.list_wallets() == []

    def test_mismatched_passwords_rejected(self, run, answers, manager, capsys):
        answers.extend([PASSWORD, "password124"])
        assert run("new", "-n", "main") == 1
        assert "do not match" in capsys.readouterr().err
        assert manager.list_wallets() == []

    def test_duplicate_name(self, run, answers, capsys):
        answers.extend([PASSWORD, PASSWORD, PASSWORD, PASSWORD])
        assert run("new", "-n", "main") == 0
        assert run("new", "-n", "main") == 1
        assert "main" in capsys.readouterr().err


class TestImport:

    def test_import(self, run, answers, manager, capsys):
        answers.extend([PHRASE_12, PASSWORD, PASSWORD])
        assert run("import", "-n", "imp", "--network", "devnet") == 0

        out = capsys.readouterr().out
        assert wallet_from_mnemonic(PHRASE_12).address in out
        assert PHRASE_12 not in out
        assert manager.get_wallet("imp").network == "devnet"

    def test_invalid_phrase_asks_no_password(self, run, answers, manager, capsys):
        answers.extend([" ".join(["abandon"] * 12)])
        assert run("import", "-n", "imp") == 1
        assert "12 or 24" in capsys.readouterr().err
        assert answers == []
        assert manager.list_wallets() == []


class TestListUseDelete:

    @pytest.fixture
    def two_wallets(self, manager):
        manager.import_wallet("a", PHRASE_12, PASSWORD)
        manager.import_wallet("b", PHRASE_12_B, PASSWORD)
        return manager

    def test_list_empty(self, run, capsys):
        assert run("list") == 0
        assert "No wallets" in capsys.readouterr().out

    def test_list_marks_active(self, run, two_wallets, capsys):
        assert run("list") == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("  a ")
        assert lines[1].startswith("* b ")

    def test_use(self, run, two_wallets, capsys):
        assert run("use", "a") == 0
        assert two_wallets.get_active_wallet().name == "a"

    def test_use_unknown(self, run, two_wallets, capsys):
        assert run("use", "zzz") == 1
        assert "zzz" in capsys.readouterr().err
        assert two_wallets.get_active_wallet().name == "b"

    def test_delete_with_yes(self, run, two_wallets, capsys):
        assert run("delete", "b", "--yes") == 0
        out = capsys.readouterr().out
        assert "Active wallet: a" in out
        assert two_wallets.get_wallet("b") is None

    def test_delete_confirmed_by_name(self, run, answers, two_wallets):
        answers.append("a")
        assert run("delete", "a") == 0
        assert two_wallets.get_wallet("a") is None

    def test_delete_cancelled(self, run, answers, two_wallets, capsys):
        answers.append("nope")
        assert run("delete", "a") == 1
        assert "Cancelled" in capsys.readouterr().out
        assert two_wallets.get_wallet("a") is not None

    def test_delete_unknown(self, run, two_wallets, capsys):
        assert run("delete", "c", "--yes") == 1
        assert two_wallets.get_active_wallet().name == "b"


class TestShowSign:

    @pytest.fixture
    def wallet(self, manager):
        return manager.import_wallet("main", PHRASE_12, PASSWORD)

    def test_show(self, run, answers, wallet, capsys):
        answers.append(PASSWORD)
        assert run("show") == 0
        out = capsys.readouterr().out
        assert wallet.address in out
        assert "abandon" not in out

    def test_show_wrong_password(self, run, answers, wallet, capsys):
        answers.append("wrong-password")
        assert run("show", "main") == 1
        assert "Wrong password" in capsys.readouterr().err

    def test_show_without_wallets(self, run, capsys):
        assert run("show") == 1
        assert "No active wallet" in capsys.readouterr().err

    def test_sign_output_verifies(self, run, answers, wallet, capsys):
        answers.append(PASSWORD)
        assert run("sign", "hello tetsuo") == 0

        signature = base58.b58decode(capsys.readouterr().out.strip())
        public_key = wallet_from_mnemonic(PHRASE_12).keypair.public_key
        assert verify(b"hello tetsuo", signature, public_key)


class TestConfig:

    def test_show_config(self, run, monkeypatch, capsys):
        monkeypatch.delenv("TETSUO_GROK_API_KEY", raising=False)
        assert run("config") == 0
        out = capsys.readouterr().out
        assert "mainnet" in out
        assert "not set" in out

    def test_switch_network(self, run, manager, capsys):
        assert run("config", "--network", "devnet") == 0
        config = manager.load_config()
        assert config.network == "devnet"
        assert config.rpc_endpoint == "https://api.devnet.solana.com"

    def test_custom_rpc(self, run, manager, capsys):
        assert run("config", "--network", "testnet", "--rpc", "https://rpc.example.com") == 0
        config = manager.load_config()
        assert config.network == "testnet"
        assert config.rpc_endpoint == "https://rpc.example.com"

    def test_api_key_is_reported_not_stored(self, run, manager, config_store, monkeypatch, capsys):
        monkeypatch.setenv("TETSUO_GROK_API_KEY", "sk-grok-secret-123")
        assert run("config", "--network", "devnet") == 0
        out = capsys.readouterr().out
        assert "set (environment)" in out
        assert "sk-grok-secret-123" not in out
        assert "sk-grok-secret-123" not in str(config_store.raw)


class TestHomeDirectory:

    def test_list_with_home(self, tmp_path, capsys):
        assert app.main(["--home", str(tmp_path), "list"]) == 0
        assert "No wallets" in capsys.readouterr().out

    def test_new_with_home_writes_files(self, tmp_path, answers, capsys):
        answers.extend([PASSWORD, PASSWORD])
        assert app.main(["--home", str(tmp_path), "new", "-n", "main", "--words", "12"]) == 0
        assert (tmp_path / "wallets.enc").exists()
        assert (tmp_path / "config.json").exists()
