"""Process table access for pyprocs."""

import logging

import psutil

from pyprocs.models import ProcessRecord

logger = logging.getLogger(__name__)

# Attributes to fetch in oneshot
_ATTRS = [
    "pid",
    "name",
    "exe",
    "cpu_percent",
    "memory_info",
    "ppid",
]

# gids() only exists on POSIX platforms
if hasattr(psutil.Process, "gids"):
    _ATTRS.append("gids")


class ProcessSource:
    """
    Samples the host process table using psutil.

    ``refresh_processes()`` takes a new sample and ``processes()`` returns
    the latest one. Processes that die mid-scan or deny access are skipped
    or reported with missing fields, never raised.
    """

    def __init__(self) -> None:
        """Initialize the ProcessSource with an empty sample."""
        self._processes: list[ProcessRecord] = []

    def refresh_processes(self) -> None:
        """
        Re-sample the process table.

        Raises:
            OSError: If the process table could not be read.
        """
        try:
            self._processes = self._collect_processes()
        except psutil.Error as exc:
            raise OSError(f"Failed to read process table: {exc}") from exc

    def processes(self) -> list[ProcessRecord]:
        """Return the most recent sample."""
        return list(self._processes)

    def kill_pid(self, pid: int) -> None:
        """Ask the OS to kill ``pid``. Best-effort, does not wait for exit."""
        try:
            psutil.Process(pid).kill()
        except psutil.NoSuchProcess:
            logger.info("Process %d already exited", pid)
        except psutil.AccessDenied:
            logger.warning("Access denied killing process %d", pid)

    def _collect_processes(self) -> list[ProcessRecord]:
        """
        Collect records for all running processes.

        psutil.process_iter() caches Process handles between calls, so
        cpu_percent is measured against the previous sample. The very first
        sample reports 0.0 for every process.
        """
        processes: list[ProcessRecord] = []

        for proc in psutil.process_iter(attrs=_ATTRS, ad_value=None):
            try:
                with proc.oneshot():
                    info = proc.info

                    mem_info = info.get("memory_info")
                    gids = info.get("gids")

                    processes.append(
                        ProcessRecord(
                            pid=info["pid"],
                            name=info.get("name") or "",
                            exe=info.get("exe") or None,
                            cpu_usage=info.get("cpu_percent") or 0.0,
                            memory=mem_info.rss if mem_info else 0,
                            virtual_memory=mem_info.vms if mem_info else 0,
                            parent=info.get("ppid"),
                            group_id=gids.real if gids else None,
                        )
                    )

            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process died mid-scan or is off limits
                continue

        return processes
