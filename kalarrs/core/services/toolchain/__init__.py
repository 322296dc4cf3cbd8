"""
Toolchain service: dependency verification and the tool checks built on it.

Re-exports the public surface::

    from kalarrs.core.services.toolchain import DependencyVerifier, check_yarn
"""

from kalarrs.core.services.toolchain.engine import DependencyVerifier  # noqa: F401
from kalarrs.core.services.toolchain.errors import (  # noqa: F401
    DependencyCheckError,
    PartialCredentialInputError,
    RemediationAborted,
    ToolchainError,
    UnsupportedPlatformError,
)
from kalarrs.core.services.toolchain.platform import (  # noqa: F401
    detect_platform,
    resolve_install_command,
)
from kalarrs.core.services.toolchain.programs import (  # noqa: F401
    check_aws_cli,
    check_aws_profile,
    check_dotnet_cli,
    check_git,
    check_homebrew,
    check_node_version,
    check_python,
    check_serverless,
    check_yarn,
)
