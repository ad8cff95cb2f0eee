"""Programmatic use: run a container to completion and read its exit code."""

from dockrun import Coordinator, Runtime

coordinator = Coordinator(Runtime("docker"))

exit_code = coordinator.run(
    [
        "--env",
        "GREETING=hello",
        "docker.io/library/alpine:latest",
        "sh",
        "-c",
        "echo $GREETING; exit 7",
    ]
)
print(f"Container exited with {exit_code}")
