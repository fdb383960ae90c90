"""Application configuration built from environment variables."""

import os

from pydantic import BaseModel, Field


class SimulationConfig(BaseModel):
    dt: float = Field(default=0.1, gt=0.0)          # seconds
    total_time: float = Field(default=100.0, ge=0.0)  # seconds
    output_interval: float = 1.0                    # seconds between history records
    record_history: bool = True
    death_on_thermal_extremes: bool = False         # reference behavior keeps the cell alive
    log_level: str = "INFO"


class CellConfig(BaseModel):
    dissipation_rate: float = Field(default=0.1, ge=0.0)  # 1/s
    max_heat: float = 1000.0
    min_heat: float = 0.0


class AppConfig(BaseModel):
    simulation: SimulationConfig = SimulationConfig()
    cell: CellConfig = CellConfig()


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _build_config(env: dict[str, str] | None = None) -> AppConfig:
    """Build config from environment variables."""
    env = os.environ if env is None else env
    return AppConfig(
        simulation=SimulationConfig(
            dt=float(env.get("METABOLAB_DT", "0.1")),
            total_time=float(env.get("METABOLAB_TOTAL_TIME", "100")),
            output_interval=float(env.get("METABOLAB_OUTPUT_INTERVAL", "1.0")),
            record_history=env.get("METABOLAB_RECORD_HISTORY", "true").lower()
            not in ("0", "false", "no"),
            death_on_thermal_extremes=_flag(env.get("METABOLAB_DEATH_ON_THERMAL_EXTREMES", "")),
            log_level=env.get("METABOLAB_LOG_LEVEL", "INFO").upper(),
        ),
        cell=CellConfig(
            dissipation_rate=float(env.get("METABOLAB_HEAT_DISSIPATION", "0.1")),
            max_heat=float(env.get("METABOLAB_MAX_HEAT", "1000")),
            min_heat=float(env.get("METABOLAB_MIN_HEAT", "0")),
        ),
    )


config = _build_config()
