import subprocess
from pathlib import Path
from unittest.mock import patch

from buildartifacts.git_facts.git import project_root


def test_uses_git_top_level():
    with patch("subprocess.check_output", return_value="/srv/checkout\n") as check_output:
        assert project_root() == Path("/srv/checkout")
    assert check_output.call_args.args[0] == ["git", "rev-parse", "--show-toplevel"]


def test_falls_back_to_cwd_outside_a_repository(tmp_path):
    error = subprocess.CalledProcessError(128, ["git", "rev-parse", "--show-toplevel"])
    with patch("subprocess.check_output", side_effect=error):
        assert project_root(str(tmp_path)) == tmp_path.resolve()


def test_falls_back_when_git_is_missing(tmp_path):
    with patch("subprocess.check_output", side_effect=FileNotFoundError("git")):
        assert project_root(str(tmp_path)) == tmp_path.resolve()
