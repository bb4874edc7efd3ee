from subprocess import run, CalledProcessError
from typing import List, Optional
import sys


PACKAGES = ["paging", "discovery", "shared", "api", "tests"]


def main(target: Optional[str] = None) -> None:
    """Run quality checks (ruff, pyright) on the project packages.

    :param target: Optional directory or file to check. Defaults to every
                   package of the project.
    :returns: ``None``.
    :raises subprocess.CalledProcessError: If any subprocess fails.
    """
    targets = [target] if target else PACKAGES
    commands: List[List[str]] = [
        ["uv", "run", "ruff", "check", *targets, "--fix"],
        ["uv", "run", "ruff", "format", *targets],
        ["uv", "run", "pyright", *targets],
    ]
    try:
        for command in commands:
            run(command, check=True)
    except CalledProcessError as exc:
        print(f"Process failed with exit code {exc.returncode}")
        raise


if __name__ == "__main__":
    arg = sys.argv[1] if len(sys.argv) > 1 else None
    main(arg)
