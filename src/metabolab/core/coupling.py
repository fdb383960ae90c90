"""Energy coupling of an exergonic reaction to an endergonic one."""

from __future__ import annotations

from pydantic import BaseModel, Field

from metabolab.core.reaction import Reaction


class EnergyCoupling(BaseModel):
    """Transfers free energy from ``source_id`` to ``sink_id``.

    The transferred energy lowers the sink's effective dG for the next rate
    evaluation. The ``1 - efficiency`` fraction is not tracked separately; it
    shows up in the sink reaction's own heat term.
    """

    id: str
    source_id: str
    sink_id: str
    efficiency: float = Field(default=0.5, gt=0.0, le=1.0)
    active: bool = True

    total_transferred: float = 0.0
    last_transferred: float = 0.0

    def can_couple(self, source: Reaction | None, sink: Reaction | None) -> bool:
        if not self.active or source is None or sink is None:
            return False
        if source.delta_g >= 0 or sink.delta_g <= 0:
            return False
        return -source.delta_g * self.efficiency >= sink.delta_g

    def apply_coupling(self, source: Reaction | None, sink: Reaction | None, dt: float) -> float:
        """Transfer energy for this step; returns kJ/mol handed to the sink."""
        if not self.can_couple(source, sink):
            self.last_transferred = 0.0
            return 0.0
        available = -source.delta_g
        required = sink.delta_g
        transferred = min(available * self.efficiency, required)
        sink.coupling_energy += transferred
        self.last_transferred = transferred
        self.total_transferred += transferred * dt
        return transferred

    def reset_runtime(self) -> None:
        self.total_transferred = 0.0
        self.last_transferred = 0.0
