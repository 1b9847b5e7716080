"""Tests for GitHelper utilities."""

import io
import subprocess
import sys
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from boilerplate_update.models.snapshot import Snapshot
from boilerplate_update.utils.git_helper import GitHelper, GitTimeoutConfig


def git(args, cwd):
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def repo(tmp_path):
    """Committed git repository with one file."""
    if not GitHelper.check_git_available():
        pytest.skip("Git not available")
    git(["init", "--quiet"], tmp_path)
    git(["config", "user.email", "test@example.com"], tmp_path)
    git(["config", "user.name", "Test"], tmp_path)
    (tmp_path / "package.json").write_text('{"name": "my-app"}\n')
    git(["add", "."], tmp_path)
    git(["commit", "--quiet", "-m", "init"], tmp_path)
    return tmp_path


class TestTimeouts:
    """Test suite for operation categories and timeouts."""

    @pytest.mark.parametrize(
        "args,category",
        [
            (["status", "--porcelain"], "fast"),
            (["rev-parse", "HEAD"], "fast"),
            (["clone", "--bare", "url", "dest"], "slow"),
            (["--git-dir=/tmp/x.git", "archive", "--format=tar", "v1.0.0"], "slow"),
            (["add", "-A", "--", "a.js"], "default"),
            (["ls-remote", "--tags", "url"], "default"),
            ([], "default"),
        ],
    )
    def test_categorize_operation(self, args, category):
        assert GitHelper._categorize_operation(args) == category

    def test_calculate_timeout_defaults(self):
        config = GitTimeoutConfig()
        assert GitHelper._calculate_timeout(["status"], config) == pytest.approx(5.01)
        assert GitHelper._calculate_timeout(["add"], config) == 30.0
        assert GitHelper._calculate_timeout(["clone"], config) == 120.0

    def test_calculate_timeout_is_capped(self):
        config = GitTimeoutConfig(base_timeout_ms=100000, max_timeout_ms=150000)
        assert GitHelper._calculate_timeout(["archive"], config) == 150.0

    def test_timeout_error_names_flag(self, tmp_path):
        with patch(
            "subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="git clone", timeout=120),
        ):
            with pytest.raises(TimeoutError) as exc:
                GitHelper.run_git_command(["clone", "--bare", "url", "dest"], tmp_path)

        message = str(exc.value)
        assert "git clone --bare" in message
        assert "--git-timeout-slow-scale" in message

    def test_check_git_available_when_missing(self):
        with patch("shutil.which", return_value=None):
            assert GitHelper.check_git_available() is False


class TestProjectOperations:
    """Test suite for status and staging in a real repository."""

    def test_clean_repository(self, repo):
        assert GitHelper.is_clean(repo) is True

    def test_untracked_file_is_dirty(self, repo):
        (repo / "notes.txt").write_text("todo\n")

        assert GitHelper.is_clean(repo) is False
        assert "?? notes.txt" in GitHelper.status(repo)

    def test_modified_file_is_dirty(self, repo):
        (repo / "package.json").write_text('{"name": "changed"}\n')
        assert GitHelper.is_clean(repo) is False

    def test_not_a_repository_is_not_clean(self, tmp_path):
        if not GitHelper.check_git_available():
            pytest.skip("Git not available")
        assert GitHelper.is_clean(tmp_path) is False

    def test_stage_adds_and_removes(self, repo):
        (repo / "app").mkdir()
        (repo / "app" / "app.js").write_text("export default {};\n")
        (repo / "package.json").unlink()

        GitHelper.stage(["app/app.js", "package.json"], repo)

        status = GitHelper.status(repo)
        assert "A  app/app.js" in status
        assert "D  package.json" in status


class TestOutputRepository:
    """Test suite for reading snapshots out of an output repository."""

    @pytest.fixture
    def output_repo(self, repo):
        git(["tag", "v1.0.0"], repo)
        (repo / "README.md").write_text("# my-app\n")
        git(["add", "."], repo)
        git(["commit", "--quiet", "-m", "v1.1.0"], repo)
        git(["tag", "v1.1.0"], repo)
        return repo

    def test_list_remote_tags(self, output_repo, tmp_path_factory):
        tags = GitHelper.list_remote_tags(str(output_repo), tmp_path_factory.mktemp("cwd"))
        assert sorted(tags) == ["v1.0.0", "v1.1.0"]

    def test_clone_and_archive(self, output_repo, tmp_path_factory):
        destination = tmp_path_factory.mktemp("clones") / "output.git"

        GitHelper.clone_bare(str(output_repo), destination)
        data = GitHelper.archive(destination, "v1.0.0")

        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as archive:
            names = archive.getnames()
        assert "package.json" in names
        assert "README.md" not in names

        snapshot = Snapshot.from_tar(GitHelper.archive(destination, "v1.1.0"))
        assert snapshot.get("README.md") == b"# my-app\n"
