# src/syskit/system/metrics.py

from __future__ import annotations

import html
import json
import logging
import os
import platform
import socket
import time
from datetime import datetime
from typing import Any

import psutil

from ..ports import LogSink

logger = logging.getLogger(__name__)

UNAVAILABLE = "unavailable"
HIGH_LOAD_PERCENT = 80.0


def _now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _format_duration(seconds: float) -> str:
    minutes, _ = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    parts = []
    if days:
        parts.append(f"{days} day{'s' if days != 1 else ''}")
    if hours:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    return "up " + ", ".join(parts)


class SystemMonitor:
    """
    OS / interpreter diagnostics.

    `ps` is the psutil module by default; tests pass a stand-in exposing the same
    functions. Any probe that fails reports UNAVAILABLE instead of raising.
    """

    def __init__(self, ps: Any = psutil, *, process_name: str = "python") -> None:
        self._ps = ps
        self._process_name = process_name

    # ---- info ----

    def get_info(self) -> dict[str, Any]:
        hostname = socket.gethostname()
        try:
            ip = socket.gethostbyname(hostname)
        except OSError:
            ip = UNAVAILABLE
        return {
            "python_version": platform.python_version(),
            "os": platform.system(),
            "hostname": hostname,
            "ip": ip,
            "uptime": self.get_uptime(),
            "server_time": _now_str(),
        }

    def get_uptime(self) -> str:
        try:
            return _format_duration(time.time() - float(self._ps.boot_time()))
        except Exception:
            logger.debug("boot_time probe failed", exc_info=True)
            return UNAVAILABLE

    # ---- metrics ----

    def get_metrics(self) -> dict[str, Any]:
        disk = self._disk_usage()
        return {
            "cpu_cores": self.get_cpu_cores(),
            "cpu_usage_percent": self.get_cpu_usage(),
            "cpu_load": self.get_load_average(),
            "memory_total": self.get_memory_total(),
            "memory_used_percent": self.get_memory_used_percent(),
            "disk_total": f"{round(disk.total / 1024 ** 3, 2)} GB" if disk else UNAVAILABLE,
            "disk_free": f"{round(disk.free / 1024 ** 3, 2)} GB" if disk else UNAVAILABLE,
            "processes": self.count_processes(self._process_name),
            "temperature": self.get_temperature(),
            "network": self.get_network_stats(),
            "time": _now_str(),
        }

    def get_cpu_cores(self) -> int:
        try:
            return int(self._ps.cpu_count() or 1)
        except Exception:
            return 1

    def get_cpu_usage(self) -> float:
        try:
            return round(float(self._ps.cpu_percent(interval=0.1)), 2)
        except Exception:
            logger.debug("cpu_percent probe failed", exc_info=True)
            return 0.0

    def get_load_average(self) -> list[float]:
        try:
            return [round(float(x), 2) for x in self._ps.getloadavg()]
        except Exception:
            return [0.0, 0.0, 0.0]

    def get_memory_total(self) -> str:
        try:
            return f"{round(self._ps.virtual_memory().total / 1024 / 1024, 2)} MB"
        except Exception:
            return UNAVAILABLE

    def get_memory_used_percent(self) -> str:
        try:
            return f"{round(float(self._ps.virtual_memory().percent), 2)}%"
        except Exception:
            return UNAVAILABLE

    def _disk_usage(self):
        try:
            return self._ps.disk_usage(os.path.abspath(os.sep))
        except Exception:
            return None

    def count_processes(self, name: str) -> int:
        """Running processes whose name contains `name` (case-insensitive)."""
        needle = name.lower()
        count = 0
        try:
            for proc in self._ps.process_iter(["name"]):
                pname = (proc.info.get("name") or "").lower()
                if needle in pname:
                    count += 1
        except Exception:
            logger.debug("process_iter probe failed", exc_info=True)
        return count

    def get_temperature(self) -> str:
        probe = getattr(self._ps, "sensors_temperatures", None)
        if probe is None:
            return UNAVAILABLE
        try:
            sensors = probe() or {}
        except Exception:
            return UNAVAILABLE
        for entries in sensors.values():
            for entry in entries:
                current = getattr(entry, "current", None)
                if current is not None:
                    return f"{round(float(current), 1)} °C"
        return UNAVAILABLE

    def get_network_stats(self) -> dict[str, Any]:
        try:
            counters = self._ps.net_io_counters(pernic=True)
        except Exception:
            return {"system": platform.system(), "interfaces": {}}
        return {
            "system": platform.system(),
            "interfaces": {
                nic: {
                    "bytes_sent": c.bytes_sent,
                    "bytes_recv": c.bytes_recv,
                    "packets_sent": c.packets_sent,
                    "packets_recv": c.packets_recv,
                }
                for nic, c in counters.items()
            },
        }

    # ---- derived ----

    def get_health(self) -> dict[str, Any]:
        metrics = self.get_metrics()

        status = "OK"
        cpu = float(metrics["cpu_usage_percent"])
        mem_raw = str(metrics["memory_used_percent"]).rstrip("%")
        try:
            mem = float(mem_raw)
        except ValueError:
            mem = 0.0
        if cpu > HIGH_LOAD_PERCENT or mem > HIGH_LOAD_PERCENT:
            status = "HIGH LOAD"

        return {"status": status, "timestamp": _now_str(), "details": metrics}

    def export(self, fmt: str = "json") -> str:
        """Info + metrics as pretty JSON, or as an escaped HTML block."""
        data = {**self.get_info(), **self.get_metrics()}
        if fmt == "html":
            body = json.dumps(data, indent=2, ensure_ascii=False)
            return html.escape(body).replace("\n", "<br />\n")
        return json.dumps(data, indent=2, ensure_ascii=False)

    def log_system_status(self, sink: LogSink) -> None:
        sink.write("System status", "info", None, self.get_metrics())
