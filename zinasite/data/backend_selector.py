"""
Backend selection.

The deployment signals are computed once; select_backend is a pure function
of those signals, the operation's privilege and whether a hosted client has
already been built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from zinasite.config import Settings


class Backend(str, Enum):
    HOSTED_DIRECT = "hosted_direct"
    GATEWAY = "gateway"


class Privilege(str, Enum):
    READ_PUBLIC = "read_public"
    READ_ADMIN = "read_admin"
    WRITE = "write"


@dataclass(frozen=True)
class DeploymentSignals:
    """
    static_only: no controllable server, so no gateway exists.
    admin_surface: running behind the admin pages.
    """

    static_only: bool
    admin_surface: bool

    @classmethod
    def from_location(
        cls,
        host: str,
        path: str,
        *,
        static_hosts: Iterable[str] = ("github.io", "github.com"),
        static_path_markers: Iterable[str] = ("/docs/",),
        admin_path_markers: Iterable[str] = ("admin",),
    ) -> "DeploymentSignals":
        host = (host or "").lower()
        path = path or "/"
        static_only = any(h in host for h in static_hosts) or any(
            m in path for m in static_path_markers
        )
        admin_surface = any(m in path for m in admin_path_markers)
        return cls(static_only=static_only, admin_surface=admin_surface)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeploymentSignals":
        return cls.from_location(
            settings.site_host,
            settings.site_path,
            static_hosts=settings.static_hosts,
            static_path_markers=settings.static_path_markers,
            admin_path_markers=settings.admin_path_markers,
        )


def select_backend(
    privilege: Privilege,
    signals: DeploymentSignals,
    hosted_ready: bool,
    *,
    admin_surface_reads_hosted: bool = False,
) -> Backend:
    """
    Decide which backend serves one call.

    Writes and admin reads need the session only the hosted backend enforces.
    Public reads use the gateway unless a hosted client already exists, so a
    page never reads from one backend while writing through the other.
    """
    if signals.static_only:
        return Backend.HOSTED_DIRECT
    if privilege is not Privilege.READ_PUBLIC:
        return Backend.HOSTED_DIRECT
    if hosted_ready:
        return Backend.HOSTED_DIRECT
    if admin_surface_reads_hosted and signals.admin_surface:
        return Backend.HOSTED_DIRECT
    return Backend.GATEWAY


class BackendSelector:
    """Binds the once-computed signals to a check for an existing hosted client."""

    def __init__(
        self,
        signals: DeploymentSignals,
        hosted_ready: Callable[[], bool],
        *,
        admin_surface_reads_hosted: bool = False,
    ):
        self.signals = signals
        self.hosted_ready = hosted_ready
        self.admin_surface_reads_hosted = admin_surface_reads_hosted

    def select(self, privilege: Privilege) -> Backend:
        return select_backend(
            privilege,
            self.signals,
            self.hosted_ready(),
            admin_surface_reads_hosted=self.admin_surface_reads_hosted,
        )
