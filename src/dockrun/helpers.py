import shutil


def get_runtime_exe(runtime: str = "docker") -> str:
    """Find the container runtime executable."""
    exe = shutil.which(runtime)
    if not exe:
        raise RuntimeError(f"{runtime} not found in PATH")

    return exe
