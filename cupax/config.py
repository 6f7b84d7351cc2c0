"""Host loop configuration."""

from flax import struct


@struct.dataclass
class RunConfig:
    """Settings for the interactive and headless runners.

    Attributes:
        scale: Window pixels per VM pixel
        cpu_hz: Cycles executed per second of wall-clock time
        fps: Frames drawn per second
        volume: Tone volume between 0 and 1
        tone_hz: Frequency of the square-wave tone
        seed: Seed for the VM random source
    """
    scale: int = struct.field(pytree_node=False, default=10)
    cpu_hz: int = struct.field(pytree_node=False, default=500)
    fps: int = struct.field(pytree_node=False, default=60)
    volume: float = struct.field(pytree_node=False, default=0.1)
    tone_hz: int = struct.field(pytree_node=False, default=440)
    seed: int = struct.field(pytree_node=False, default=0)

    def __post_init__(self):
        for name in ("scale", "cpu_hz", "fps", "tone_hz"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be between 0 and 1, got {self.volume}")
        if self.cpu_hz < self.fps:
            raise ValueError(
                f"cpu_hz ({self.cpu_hz}) must be at least fps ({self.fps}), "
                "every frame runs at least one cycle"
            )

    @property
    def cycles_per_frame(self) -> int:
        """Number of cycles to run between two drawn frames."""
        return self.cpu_hz // self.fps
