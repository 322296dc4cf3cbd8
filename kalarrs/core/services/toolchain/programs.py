"""
Tool checks: one ``DependencySpec`` per toolchain dependency.

Each ``check_*`` function builds its spec, runs it through a
``DependencyVerifier`` and returns the ``VerificationReport``. Tool
quirks (version strings on stderr, interactive remediations) live in
the classifiers and remediations defined here, never in the engine.
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from kalarrs.core.models.dependency import (
    CustomPredicate,
    DependencySpec,
    ExecutionResult,
    Outcome,
    Platform,
    ReportStatus,
    VerificationReport,
    looks_like_command_not_found,
)
from kalarrs.core.services.toolchain.engine import DependencyVerifier
from kalarrs.core.services.toolchain.errors import PartialCredentialInputError, RemediationAborted
from kalarrs.core.services.toolchain.version_constraint import extract_version, satisfies

logger = logging.getLogger(__name__)

HOMEBREW_INSTALL = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)

YARN_INSTALL = {
    Platform.MACOS: "brew update && brew install yarn",
    Platform.WINDOWS: "choco install yarn -y",
    Platform.LINUX: "npm install --global yarn",
}

DOTNET_INSTALL = {
    Platform.MACOS: "brew update && brew install --cask dotnet-sdk",
    Platform.WINDOWS: "winget install --id Microsoft.DotNet.SDK.8 -e",
    Platform.LINUX: "sudo apt-get update && sudo apt-get install -y dotnet-sdk-8.0",
}

AWS_CLI_INSTALL = {
    Platform.MACOS: "pip3 install awscli --upgrade --user",
    Platform.WINDOWS: "msiexec.exe /i https://awscli.amazonaws.com/AWSCLIV2.msi /qn",
    Platform.LINUX: "pip3 install awscli --upgrade --user",
}

GIT_INSTALL = {
    Platform.MACOS: "brew update && brew install git",
    Platform.WINDOWS: "winget install --id Git.Git -e",
    Platform.LINUX: "sudo apt-get update && sudo apt-get install -y git",
}

_AWS_CLI_VERSION_RE = re.compile(r"aws-cli/\d+\.\d+\.\d+", re.IGNORECASE)
_DOTNET_VERSION_RE = re.compile(r"^\s*\d+\.\d+\.\d+", re.MULTILINE)
_PIP_PYTHON_RE = r"\(python (\d+\.\d+)\)"


# ── Simple tools ────────────────────────────────────────────────


def homebrew_spec() -> DependencySpec:
    return DependencySpec(
        name="Home Brew",
        check_command="brew --version",
        install_command={Platform.MACOS: HOMEBREW_INSTALL},
    )


def yarn_spec() -> DependencySpec:
    return DependencySpec(name="Yarn", check_command="yarn --version", install_command=YARN_INSTALL)


def serverless_spec() -> DependencySpec:
    return DependencySpec(
        name="Serverless",
        check_command="sls --version",
        install_command="yarn global add serverless --ignore-engines",
    )


def git_spec() -> DependencySpec:
    return DependencySpec(name="Git", check_command="git --version", install_command=GIT_INSTALL)


def check_homebrew(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(homebrew_spec())


def check_yarn(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(yarn_spec())


def check_serverless(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(serverless_spec())


def check_git(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(git_spec())


# ── .NET CLI ────────────────────────────────────────────────────


def classify_dotnet(result: ExecutionResult, name: str) -> Outcome:
    """``dotnet --version`` without an SDK exits non-zero with a hint.

    First-run banners can land on stderr next to a valid version, so a
    version line on stdout wins.
    """
    if _DOTNET_VERSION_RE.search(result.stdout):
        return Outcome.INSTALLED
    text = f"{result.stdout}\n{result.stderr}"
    if looks_like_command_not_found(result.stderr) or re.search(
        r"No \.NET SDKs were found|is not recognized", text, re.IGNORECASE,
    ):
        return Outcome.NOT_INSTALLED
    return Outcome.AMBIGUOUS


def dotnet_spec() -> DependencySpec:
    return DependencySpec(
        name=".NET Core CLI",
        check_command="dotnet --version",
        install_command=DOTNET_INSTALL,
        classifier=CustomPredicate(fn=classify_dotnet),
    )


def check_dotnet_cli(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(dotnet_spec())


# ── AWS CLI ─────────────────────────────────────────────────────


def classify_aws_cli(result: ExecutionResult, name: str) -> Outcome:
    """AWS CLI v1 prints ``aws-cli/1.11.190 Python/...`` to stderr.

    The version banner means installed; anything else means the
    install should be offered.
    """
    text = f"{result.stdout}\n{result.stderr}"
    if _AWS_CLI_VERSION_RE.search(text) and not looks_like_command_not_found(result.stderr):
        return Outcome.INSTALLED
    return Outcome.NOT_INSTALLED


def aws_cli_spec() -> DependencySpec:
    return DependencySpec(
        name="aws-cli",
        check_command="aws --version",
        install_command=AWS_CLI_INSTALL,
        classifier=CustomPredicate(fn=classify_aws_cli),
    )


def check_aws_cli(verifier: DependencyVerifier) -> VerificationReport:
    return verifier.verify(aws_cli_spec())


# ── Node ────────────────────────────────────────────────────────


def node_version_satisfies(reported: str, minimum: str) -> bool:
    """Whether a ``node --version`` string meets ``minimum``."""
    version = extract_version(reported)
    return version is not None and satisfies(version, minimum)


def check_node_version(verifier: DependencyVerifier, minimum: str) -> VerificationReport:
    """Node must be present and at least ``minimum``.

    An old runtime is reported but left to the caller to decide on;
    node is never installed from here.
    """
    spec = DependencySpec(name="Node", check_command="node --version", auto_install=False)
    outcome, result = verifier.probe(spec)
    if outcome != Outcome.INSTALLED:
        verifier.reporter.error("Node not installed")
        return VerificationReport(
            dependency=spec.name,
            status=ReportStatus.AUTO_INSTALL_DISABLED,
            detail=result.stderr.strip() or None,
        )

    current = result.stdout.strip()
    if not node_version_satisfies(current, minimum):
        verifier.reporter.error(f"Node min version {minimum}. Current {current}")
        verifier.reporter.warn(f"Please update node to {minimum} or later")
        return VerificationReport(
            dependency=spec.name,
            status=ReportStatus.UNSATISFIED_VERSION,
            detail=current,
        )

    verifier.reporter.success(f"Node {current} is installed")
    return VerificationReport(dependency=spec.name, status=ReportStatus.INSTALLED, detail=current)


# ── Python ──────────────────────────────────────────────────────


def python_spec() -> DependencySpec:
    # pip3 missing for any reason means python3 should be (re)installed.
    return DependencySpec(
        name="Python",
        check_command="pip3 --version",
        install_command={
            Platform.MACOS: "brew update && brew install python3",
            Platform.LINUX: "sudo apt-get update && sudo apt-get install -y python3 python3-pip",
            Platform.WINDOWS: "winget install --id Python.Python.3.12 -e",
        },
        classifier=CustomPredicate(fn=lambda result, name: Outcome.NOT_INSTALLED),
    )


def python_bin_path(python_version: str) -> str:
    """User-site bin directory pip installs console scripts into on macOS."""
    return f"Library/Python/{python_version}/bin"


def ensure_profile_path(profile: Path, python_version: str) -> bool:
    """Append the user-site bin directory to ``profile`` if missing.

    Returns:
        True when the profile was changed (a new shell is needed).
    """
    entry = python_bin_path(python_version)
    existing = profile.read_text(encoding="utf-8") if profile.is_file() else ""
    if entry.lower() in existing.lower():
        return False

    logger.info("Adding %s to PATH in %s", entry, profile)
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with profile.open("a", encoding="utf-8") as fh:
        fh.write(f"{prefix}export PATH=$PATH:~/{entry}\n")
    return True


def check_python(verifier: DependencyVerifier, minimum: str) -> VerificationReport:
    """Python 3 with pip, at least ``minimum``, with its bin dir on PATH.

    A PATH change only takes effect in a new shell session, which is
    signalled through ``restart_required`` rather than exiting.
    """
    report = verifier.verify(python_spec())
    if not report.installed:
        if report.detail and "xcode-select" in report.detail.lower():
            verifier.reporter.error("Xcode Developer tools are not installed")
            verifier.runner.run("xcode-select --install")
            verifier.reporter.warn(
                "Ran xcode-select --install for you. Install the tools and run the command again"
            )
        return report

    version = extract_version(report.detail or "", _PIP_PYTHON_RE)
    if version is None or not satisfies(version, minimum):
        verifier.reporter.error(f"Python min version {minimum}. Current {version or 'unknown'}")
        return report.model_copy(
            update={"status": ReportStatus.UNSATISFIED_VERSION, "detail": version},
        )

    profile = verifier.config.shell_profile_path
    if verifier.platform == Platform.MACOS and profile is not None:
        if ensure_profile_path(profile, version):
            verifier.reporter.warn(
                f"Added ~/{python_bin_path(version)} to {profile.name}. "
                "Open a new shell and run the command again"
            )
            return report.model_copy(update={"restart_required": True, "detail": version})

    return report.model_copy(update={"detail": version})


# ── AWS profile ─────────────────────────────────────────────────


def classify_aws_profile(result: ExecutionResult, name: str) -> Outcome:
    """``aws configure get`` exits non-zero both for a missing profile and
    for a profile without the key; both mean the profile needs setting up.
    """
    if re.search(r"could not be found", result.stderr, re.IGNORECASE):
        return Outcome.NOT_INSTALLED
    if result.exit_code != 0 and not result.stderr.strip():
        return Outcome.NOT_INSTALLED
    return Outcome.AMBIGUOUS


def configure_aws_profile(
    verifier: DependencyVerifier,
    profile_name: str,
    region: str,
) -> str:
    """Collect both keys and write the profile as one chained command.

    Raises:
        PartialCredentialInputError: Either key left empty; nothing is run.
        RemediationAborted: The chained ``aws configure set`` failed.
    """
    access_key = verifier.prompter.ask("AWS Access Key", secret=True)
    secret_key = verifier.prompter.ask("AWS Secret Key", secret=True)
    if not (access_key and secret_key):
        raise PartialCredentialInputError(
            "You must provide both an access key and secret key"
        )

    profile = shlex.quote(profile_name)
    commands = [
        f"aws configure set aws_access_key_id {shlex.quote(access_key)} --profile {profile}",
        f"aws configure set aws_secret_access_key {shlex.quote(secret_key)} --profile {profile}",
        f"aws configure set region {shlex.quote(region)} --profile {profile}",
    ]
    result = verifier.runner.run(
        " && ".join(commands),
        cwd=verifier.config.working_directory,
        redact=(access_key, secret_key),
    )
    if result.exit_code != 0:
        raise RemediationAborted(
            f"Unable to configure AWS profile {profile_name}: {result.stderr.strip()}"
        )
    verifier.reporter.success(f"{profile_name} AWS profile setup")
    return result.stdout


def aws_profile_spec(
    verifier: DependencyVerifier,
    profile_name: str,
    region: str,
) -> DependencySpec:
    # The check prints the access key itself; keep it out of the report.
    return DependencySpec(
        name=f"AWS profile {profile_name}",
        check_command=f"aws configure get aws_access_key_id --profile {shlex.quote(profile_name)}",
        classifier=CustomPredicate(fn=classify_aws_profile),
        prompt=f"Setup {profile_name} AWS profile?",
        remediate=lambda: configure_aws_profile(verifier, profile_name, region),
        report_detail=f"profile {profile_name} configured",
    )


def check_aws_profile(
    verifier: DependencyVerifier,
    has_aws_cli: bool,
    region: str,
    profile_name: str | None = None,
) -> VerificationReport | None:
    """Ensure a named AWS profile has credentials.

    Returns None when the check is skipped (no AWS CLI, or no profile
    name given).
    """
    if not has_aws_cli:
        verifier.reporter.warn("Skipping AWS profile check.")
        return None

    if profile_name is None:
        profile_name = verifier.prompter.ask("What is the name of your aws profile?")
    if not profile_name:
        verifier.reporter.warn("Skipping AWS Profile Check")
        return None

    return verifier.verify(aws_profile_spec(verifier, profile_name, region))
