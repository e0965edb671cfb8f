import logging
import os
from dataclasses import dataclass
from importlib import metadata

from .constants import APP_NAME, DIST_NAME, PROJECT_URL

logger = logging.getLogger(APP_NAME)

UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuildInfo:
    """Program and build metadata, created once at startup.

    Attributes:
        name (str): The program name.
        version (str): The installed package version.
        project (str): The project homepage.
        git_commit (str): Commit the build was made from.
        build_time (str): When the build was made.
        build_by (str): Who or what made the build.
    """

    name: str
    version: str
    project: str = PROJECT_URL
    git_commit: str = UNKNOWN
    build_time: str = UNKNOWN
    build_by: str = UNKNOWN

    @classmethod
    def load(cls) -> "BuildInfo":
        """Reads the version from the installed distribution's metadata.

        Build details come from CURATOR_GIT_COMMIT, CURATOR_BUILD_TIME and
        CURATOR_BUILD_BY when a packaging pipeline sets them.
        """
        try:
            version = metadata.version(DIST_NAME)
        except metadata.PackageNotFoundError:
            logger.debug(f"Distribution '{DIST_NAME}' is not installed")
            version = UNKNOWN

        return cls(
            name=APP_NAME,
            version=version,
            git_commit=os.environ.get("CURATOR_GIT_COMMIT", UNKNOWN),
            build_time=os.environ.get("CURATOR_BUILD_TIME", UNKNOWN),
            build_by=os.environ.get("CURATOR_BUILD_BY", UNKNOWN),
        )


def program_info(info: BuildInfo, only: bool = False) -> str:
    """Renders the text of the `version` command.

    Args:
        info (BuildInfo): The metadata to render.
        only (bool, optional): Print the bare version number. Defaults to False.
    """
    if only:
        return info.version
    return (
        f"{info.name} version: {info.version}\n"
        f"Git commit hash: {info.git_commit}\n"
        f"Built on: {info.build_time}\n"
        f"Built by: {info.build_by}"
    )
