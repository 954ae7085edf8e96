import pytest
from pathlib import Path
from unittest.mock import Mock

from gitchain import Chain, CommandRunner, DebugSink, set_debug_mode


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch, tmp_path_factory):
    """Give every test a predictable git identity and no user/system config."""
    home = tmp_path_factory.mktemp("home")
    gitconfig = home / ".gitconfig"
    gitconfig.write_text(
        "[user]\n"
        "\tname = Test User\n"
        "\temail = test@example.com\n"
        "[init]\n"
        "\tdefaultBranch = main\n"
        "[commit]\n"
        "\tgpgsign = false\n"
        "[tag]\n"
        "\tgpgsign = false\n"
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    # Keep git from discovering a repository above the test directories
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path_factory.getbasetemp()))
    for var in ("GITCHAIN_DEBUG", "GITCHAIN_SHELL_TYPE", "GITCHAIN_SHELL_FLAG",
                "GITCHAIN_TIMEOUT", "GITCHAIN_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)

    yield

    set_debug_mode(False)


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a temporary git repository with one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()

    chain = Chain.new(repo)
    chain.init().must()

    (repo / "a.txt").write_text("x")
    chain.add().commit("init").must()

    yield repo


@pytest.fixture
def write_file():
    """Write ``content`` to ``root/name``, creating parent directories."""
    def _write(root: Path, name: str, content: str = "content") -> Path:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def query_runner():
    """Mock runner handed out by ``new_config`` for query helpers."""
    runner = Mock(spec=CommandRunner)
    runner.with_expect_exit.return_value = runner
    return runner


@pytest.fixture
def mock_runner(query_runner):
    """Mock runner for chain steps; queries get ``query_runner``."""
    runner = Mock(spec=CommandRunner)
    runner.path = "/repo"
    runner.new_config.return_value = query_runner
    runner.with_debug_mode.return_value = runner
    return runner


@pytest.fixture
def mock_sink():
    return Mock(spec=DebugSink)
