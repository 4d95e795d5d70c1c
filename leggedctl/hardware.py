"""Hardware handles for contact sensors and hybrid position/velocity/torque joints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar


class HardwareInterfaceError(RuntimeError):
    """Raised when a hardware handle or resource cannot be created or found."""


@dataclass
class JointState:
    """Measured state of one joint, updated in place by the hardware layer."""

    name: str
    position: float = 0.0
    velocity: float = 0.0
    effort: float = 0.0


@dataclass
class JointCommand:
    """Command storage for one hybrid joint, read by the hardware layer."""

    position_desired: float = 0.0
    velocity_desired: float = 0.0
    kp: float = 0.0
    kd: float = 0.0
    feedforward: float = 0.0


class ContactSensorHandle:
    """Read access to a named foot contact sensor."""

    def __init__(self, name: str, sensor: Callable[[], bool] | None) -> None:
        if sensor is None:
            raise HardwareInterfaceError(f"Cannot create handle '{name}'. Contact sensor is missing.")
        self.name = name
        self._sensor = sensor

    def is_contact(self) -> bool:
        """Whether the sensor currently reports contact."""
        return bool(self._sensor())


class HybridJointHandle:
    """Joint state together with a PD-plus-feedforward command."""

    def __init__(self, state: JointState | None, command: JointCommand | None) -> None:
        if state is None:
            raise HardwareInterfaceError("Cannot create handle. Joint state is missing.")
        if command is None:
            raise HardwareInterfaceError(f"Cannot create handle '{state.name}'. Command storage is missing.")
        self._state = state
        self._command = command

    @property
    def name(self) -> str:
        return self._state.name

    @property
    def position(self) -> float:
        return self._state.position

    @property
    def velocity(self) -> float:
        return self._state.velocity

    @property
    def effort(self) -> float:
        return self._state.effort

    @property
    def position_desired(self) -> float:
        return self._command.position_desired

    @position_desired.setter
    def position_desired(self, value: float) -> None:
        self._command.position_desired = float(value)

    @property
    def velocity_desired(self) -> float:
        return self._command.velocity_desired

    @velocity_desired.setter
    def velocity_desired(self, value: float) -> None:
        self._command.velocity_desired = float(value)

    @property
    def kp(self) -> float:
        return self._command.kp

    @kp.setter
    def kp(self, value: float) -> None:
        self._command.kp = float(value)

    @property
    def kd(self) -> float:
        return self._command.kd

    @kd.setter
    def kd(self, value: float) -> None:
        self._command.kd = float(value)

    @property
    def feedforward(self) -> float:
        return self._command.feedforward

    @feedforward.setter
    def feedforward(self, value: float) -> None:
        self._command.feedforward = float(value)

    def set_command(self, pos_des: float, vel_des: float, kp: float, kd: float, ff: float) -> None:
        """Write all five command fields at once."""
        self.position_desired = pos_des
        self.velocity_desired = vel_des
        self.kp = kp
        self.kd = kd
        self.feedforward = ff


HandleT = TypeVar("HandleT")


class ResourceManager(Generic[HandleT]):
    """Named handles, optionally recording which ones have been claimed."""

    def __init__(self, claim_resources: bool) -> None:
        self._claim_resources = claim_resources
        self._handles: dict[str, HandleT] = {}
        self._claims: set[str] = set()

    def register_handle(self, handle: HandleT) -> None:
        """Add a handle, replacing any earlier one of the same name."""
        self._handles[handle.name] = handle  # type: ignore[attr-defined]

    def get_handle(self, name: str) -> HandleT:
        """Return the handle called ``name``, claiming it if this manager claims."""
        try:
            handle = self._handles[name]
        except KeyError:
            raise HardwareInterfaceError(
                f"Could not find resource '{name}' in '{type(self).__name__}'."
            ) from None
        if self._claim_resources:
            self._claims.add(name)
        return handle

    def get_names(self) -> list[str]:
        """Names of all registered handles in sorted order."""
        return sorted(self._handles)

    def claims(self) -> set[str]:
        """Names of the handles claimed so far."""
        return set(self._claims)

    def clear_claims(self) -> None:
        """Forget every claim."""
        self._claims.clear()

    def register_all(self, handles: Iterable[HandleT]) -> None:
        for handle in handles:
            self.register_handle(handle)


class ContactSensorInterface(ResourceManager[ContactSensorHandle]):
    """Contact sensors; reading them claims nothing."""

    def __init__(self) -> None:
        super().__init__(claim_resources=False)


class HybridJointInterface(ResourceManager[HybridJointHandle]):
    """Hybrid joints; taking a handle claims the joint."""

    def __init__(self) -> None:
        super().__init__(claim_resources=True)