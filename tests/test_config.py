"""Tests for configuration functionality."""

import pytest

from gitchain import FileDebugSink, RichDebugSink, set_debug_mode
from gitchain.config import CONFIG_SECTION, DEFAULT_CONFIG_FILENAME, Config


def test_default_config():
    """Test default configuration values."""
    config = Config()
    assert config.debug is False
    assert config.shell_type is None
    assert config.shell_flag == "-c"
    assert config.timeout is None
    assert config.log_file is None


def test_config_load_nonexistent(tmp_path):
    """Test loading configuration when file doesn't exist."""
    config = Config.load(tmp_path)
    assert config == Config()


def test_config_load_and_save(tmp_path):
    """Test saving and loading configuration."""
    config = Config(
        debug=True,
        shell_type="bash",
        shell_flag="-lc",
        timeout=12.5,
        log_file="logs/gitchain.log",
    )

    config.save(tmp_path)
    loaded_config = Config.load(tmp_path)

    assert loaded_config.debug is True
    assert loaded_config.shell_type == "bash"
    assert loaded_config.shell_flag == "-lc"
    assert loaded_config.timeout == 12.5
    assert loaded_config.log_file == "logs/gitchain.log"


def test_config_save_omits_unset_values(tmp_path):
    Config(debug=True).save(tmp_path)

    content = (tmp_path / DEFAULT_CONFIG_FILENAME).read_text()
    assert f"[{CONFIG_SECTION}]" in content
    assert "debug = true" in content
    assert "shell_type" not in content
    assert "log_file" not in content


def test_config_load_invalid(tmp_path):
    """Test loading invalid configuration file."""
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("invalid [ toml")

    config = Config.load(tmp_path)
    assert config == Config()


def test_config_load_ignores_other_tables(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        '[other]\nshell_type = "zsh"\n\n[gitchain]\nshell_type = "bash"\n'
    )

    assert Config.load(tmp_path).shell_type == "bash"


def test_config_load_sanitizes_strings(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        '[gitchain]\nshell_type = "bash; rm -rf /"\nshell_flag = "-c\\u0000"\n'
    )

    config = Config.load(tmp_path)
    assert config.shell_type == "bash"
    assert config.shell_flag == "-c"


@pytest.mark.parametrize("log_file", ["../outside.log", "/var/log/gitchain.log", "logs\\x.log"])
def test_config_load_drops_unsafe_log_file(tmp_path, log_file):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        f"[gitchain]\nlog_file = '{log_file}'\ndebug = true\n"
    )

    config = Config.load(tmp_path)
    assert config.log_file is None
    assert config.debug is True


def test_config_save_drops_unsafe_log_file(tmp_path):
    Config(log_file="../outside.log").save(tmp_path)

    assert "log_file" not in (tmp_path / DEFAULT_CONFIG_FILENAME).read_text()


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("GITCHAIN_DEBUG", "yes")
    monkeypatch.setenv("GITCHAIN_SHELL_TYPE", "zsh")
    monkeypatch.setenv("GITCHAIN_TIMEOUT", "3")

    config = Config()
    assert config.debug is True
    assert config.shell_type == "zsh"
    assert config.timeout == 3.0


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("GITCHAIN_SHELL_TYPE", "zsh")

    assert Config(shell_type="bash").shell_type == "bash"


def test_file_values_override_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GITCHAIN_SHELL_FLAG", "-lc")
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text('[gitchain]\nshell_flag = "-ic"\n')

    assert Config.load(tmp_path).shell_flag == "-ic"


def test_build_runner(tmp_path):
    runner = Config(shell_type="bash", shell_flag="-lc", timeout=5).build_runner(tmp_path)

    assert runner.path == str(tmp_path)
    assert runner.shell_type == "bash"
    assert runner.shell_flag == "-lc"
    assert runner.timeout == 5

    plain = Config().build_runner(tmp_path)
    assert plain.shell_type is None
    assert plain.timeout is None


def test_build_sink(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert isinstance(Config().build_sink(), RichDebugSink)

    sink = Config(log_file="logs/debug.log").build_sink()
    assert isinstance(sink, FileDebugSink)
    assert (tmp_path / "logs").is_dir()


def test_open_chain(temp_git_repo):
    chain = Config(debug=True, shell_type="sh").open_chain(temp_git_repo)

    assert chain.debug is True
    assert chain.runner.debug is True
    assert chain.runner.shell_type == "sh"
    assert chain.get_current_branch() == "main"


def test_open_chain_honours_process_debug_default(temp_git_repo):
    set_debug_mode(True)

    assert Config().open_chain(temp_git_repo).debug is True


def test_open_chain_writes_debug_log(temp_git_repo, monkeypatch):
    monkeypatch.chdir(temp_git_repo)

    Config(debug=True, log_file="debug.log").open_chain(temp_git_repo).status().must()

    content = (temp_git_repo / "debug.log").read_text()
    assert "DEBUG" in content
    assert "test_config.py" in content
    assert "On branch main" in content
