"""Tests for the CLI entry point with the agents replaced by scripted fakes."""

from unittest.mock import patch

import pytest

from conftest import ScriptedSquad, approve, brief
from squad.errors import ResearchFailure
from squad.main import main, run
from squad.state import RunStatus


class TestRun:
    @patch("squad.main.write_course")
    @patch("squad.main.default_squad")
    def test_completed_run_exports(self, mock_squad, mock_write, mock_config, course, tmp_path, capsys):
        mock_squad.return_value = ScriptedSquad(
            research=[brief(1)], verdicts=[approve()], document=course
        ).as_squad()
        mock_write.return_value = tmp_path / "quantum.md"

        status = run("Quantum Physics")

        assert status is RunStatus.COMPLETED
        mock_write.assert_called_once_with(course, tuple(brief(1).sources))
        out = capsys.readouterr().out
        assert "[Researcher] Research complete. Found 2 relevant sources." in out
        assert "[SQUAD] Status: completed" in out

    @patch("squad.main.write_course")
    @patch("squad.main.default_squad")
    def test_no_export(self, mock_squad, mock_write, mock_config, course):
        mock_squad.return_value = ScriptedSquad(
            research=[brief(1)], verdicts=[approve()], document=course
        ).as_squad()

        run("Quantum Physics", export=False)

        mock_write.assert_not_called()

    def test_empty_topic_raises(self, mock_config):
        with pytest.raises(ValueError):
            run("   ")


class TestMain:
    @patch("squad.main.write_course")
    @patch("squad.main.default_squad")
    def test_error_exits_non_zero(self, mock_squad, mock_write, mock_config):
        mock_squad.return_value = ScriptedSquad(research=[ResearchFailure("down")]).as_squad()

        with patch("sys.argv", ["squad", "Quantum", "Physics"]):
            with pytest.raises(SystemExit) as excinfo:
                main()

        assert excinfo.value.code == 1
        mock_write.assert_not_called()

    @patch("squad.main.run", return_value=RunStatus.COMPLETED)
    def test_args_joined_and_flag_removed(self, mock_run):
        with patch("sys.argv", ["squad", "--no-export", "Sourdough", "Baking"]):
            main()
        mock_run.assert_called_once_with("Sourdough Baking", export=False)
