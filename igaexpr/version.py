#---------------------------------------------------------------------------#
# This file is part of IGAEXPR which is released under MIT License. See the #
# LICENSE file for full license details.                                    #
#---------------------------------------------------------------------------#
def extract_version() -> str:
    """
    Returns either the version of the installed package (e.g. "0.1.0") or,
    for a source checkout which is not installed, the one found in
    pyproject.toml (e.g. "0.1.0-dev (at /project/location)").

    Returns
    -------
    str
        The package version.

    """
    import importlib.metadata
    from contextlib import suppress
    from pathlib    import Path

    with suppress(importlib.metadata.PackageNotFoundError):
        return importlib.metadata.version('igaexpr')

    root_dir = Path(__file__).parent.parent
    with suppress(FileNotFoundError, StopIteration):
        with open(root_dir / "pyproject.toml", encoding="utf-8") as pyproject_toml:
            version_line = next(line for line in pyproject_toml if line.startswith("version"))
            version = version_line.split("=")[1].strip("'\"\n ")
            return f"{version}-dev (at {root_dir})"

    return "unknown"


__version__ = extract_version()
