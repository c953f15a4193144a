"""Health checks for the service host: liveness, disk, CPU load and memory."""

from __future__ import annotations

from http import HTTPStatus
from typing import NamedTuple

import psutil

B = 1
KB = 1024 * B
MB = 1024 * KB
GB = 1024 * MB

DISK_PATH = "/"
CRITICAL_PERCENT = 95
WARNING_PERCENT = 90


class CheckResult(NamedTuple):
    """The HTTP status and the text line a health check answers with."""

    status: HTTPStatus
    message: str

    @property
    def body(self) -> str:
        """The response body: the message on a line of its own."""
        return "\n" + self.message


def _grade(used_percent: float, critical_status: HTTPStatus) -> tuple[HTTPStatus, str]:
    percent = int(used_percent)
    if percent >= CRITICAL_PERCENT:
        return critical_status, "CRITICAL"
    if percent >= WARNING_PERCENT:
        return HTTPStatus.TOO_MANY_REQUESTS, "WARNING"
    return HTTPStatus.OK, "OK"


def _usage_message(text: str, used: int, total: int, used_percent: float) -> str:
    used, total = int(used), int(total)
    return (
        f"{text} - Free space: {used // MB}MB ({used // GB}GB) / "
        f"{total // MB}MB ({total // GB}GB) | Used: {int(used_percent)}%"
    )


def health_check() -> CheckResult:
    """Answer the liveness probe."""
    return CheckResult(HTTPStatus.OK, "OK")


def disk_status(used: int, total: int, used_percent: float) -> CheckResult:
    """Grade disk usage; a critical disk still answers 200."""
    status, text = _grade(used_percent, HTTPStatus.OK)
    return CheckResult(status, _usage_message(text, used, total, used_percent))


def ram_status(used: int, total: int, used_percent: float) -> CheckResult:
    """Grade memory usage."""
    status, text = _grade(used_percent, HTTPStatus.INTERNAL_SERVER_ERROR)
    return CheckResult(status, _usage_message(text, used, total, used_percent))


def cpu_status(cores: int, load1: float, load5: float, load15: float) -> CheckResult:
    """Grade the five-minute load average against the number of cores."""
    if load5 >= cores - 1:
        status, text = HTTPStatus.INTERNAL_SERVER_ERROR, "CRITICAL"
    elif load5 >= cores - 2:
        status, text = HTTPStatus.TOO_MANY_REQUESTS, "WARNING"
    else:
        status, text = HTTPStatus.OK, "OK"
    message = f"{text} - Load average: {load1:.2f}, {load5:.2f}, {load15:.2f} | Cores: {cores}"
    return CheckResult(status, message)


def disk_check() -> CheckResult:
    """Check the usage of the root file system."""
    usage = psutil.disk_usage(DISK_PATH)
    return disk_status(usage.used, usage.total, usage.percent)


def cpu_check() -> CheckResult:
    """Check the load average of this host."""
    cores = psutil.cpu_count(logical=False) or 0
    load1, load5, load15 = psutil.getloadavg()
    return cpu_status(cores, load1, load5, load15)


def ram_check() -> CheckResult:
    """Check the memory usage of this host."""
    memory = psutil.virtual_memory()
    return ram_status(memory.used, memory.total, memory.percent)