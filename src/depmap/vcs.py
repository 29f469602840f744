"""Git client - the version-control collaborator used by the install engine."""

import logging
from asyncio import create_subprocess_exec
from asyncio.subprocess import DEVNULL
from asyncio.subprocess import PIPE
from pathlib import Path

from .exceptions import ExternalToolError

logger = logging.getLogger(__name__)


class GitClient:
    """VersionControlProtocol implementation that runs the `git` executable.

    Commands run from the project root, so destinations are project-relative.
    """

    def __init__(self, cwd: Path, executable: str = "git"):
        self.cwd = cwd
        self.executable = executable

    async def _run(self, *args: str) -> str:
        command = " ".join((self.executable, *args))
        logger.debug(f"Running: {command}")

        try:
            process = await create_subprocess_exec(
                self.executable,
                *args,
                stdin=DEVNULL,
                stdout=PIPE,
                stderr=PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            raise ExternalToolError(f"Failed to run {command}: {e}", context={"command": command}) from e

        stdout, stderr = await process.communicate()
        output = stdout.decode(errors="replace")
        error_output = stderr.decode(errors="replace")

        if process.returncode != 0:
            captured = (error_output or output).strip()
            raise ExternalToolError(
                f"Command failed with code {process.returncode}: {command}\n{captured}".strip(),
                returncode=process.returncode,
                output=captured,
                context={"command": command},
            )

        return (output + error_output).strip()

    async def clone(self, url: str, destination: str, branch: str | None = None) -> str:
        args = ["clone", url, destination]
        if branch:
            args += ["--branch", branch]
        return await self._run(*args)

    async def pull(self, destination: str, branch: str | None = None) -> str:
        args = ["-C", destination, "pull"]
        if branch:
            args += ["origin", branch]
        return await self._run(*args)

    async def switch(self, destination: str, ref: str) -> str:
        return await self._run("-C", destination, "switch", ref)
