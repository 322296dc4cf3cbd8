"""
Shared test fixtures and test doubles.
"""

from pathlib import Path

import pytest

from kalarrs.adapters.mock import MockCommandRunner
from kalarrs.core.models.dependency import Platform
from kalarrs.core.models.settings import EngineConfig, Settings
from kalarrs.core.services.toolchain.engine import DependencyVerifier


class ScriptedPrompter:
    """Answers prompts from queues and records every question asked."""

    def __init__(self, confirms=(), answers=()):
        self.confirms = list(confirms)
        self.answers = list(answers)
        self.questions: list[str] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.questions.append(message)
        assert self.confirms, f"unexpected confirm: {message}"
        return self.confirms.pop(0)

    def ask(self, message: str, default: str = "", secret: bool = False) -> str:
        self.questions.append(message)
        assert self.answers, f"unexpected prompt: {message}"
        return self.answers.pop(0)


class RecordingReporter:
    """Keeps notifications per level."""

    def __init__(self):
        self.lines: list[tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.lines.append((level, message))

    def success(self, message: str) -> None:
        self._record("success", message)

    def warn(self, message: str) -> None:
        self._record("warn", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    def info(self, message: str) -> None:
        self._record("info", message)

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.lines if lvl == level]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def make_verifier(tmp_path: Path, runner, prompter, reporter):
    """Build a verifier on the mock collaborators (Linux unless told otherwise)."""

    def _make(
        platform: Platform = Platform.LINUX,
        auto_install: bool = True,
        shell_profile: Path | None = None,
        working_directory: Path | None = None,
    ) -> DependencyVerifier:
        config = EngineConfig(
            working_directory=working_directory or tmp_path,
            shell_profile_path=shell_profile,
            auto_install=auto_install,
        )
        return DependencyVerifier(
            config=config,
            runner=runner,
            prompter=prompter,
            reporter=reporter,
            platform=platform,
        )

    return _make


@pytest.fixture
def verifier(make_verifier) -> DependencyVerifier:
    return make_verifier()
